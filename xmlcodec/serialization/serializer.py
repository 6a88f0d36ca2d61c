"""Serializers bound to a single model type."""

import xml.etree.ElementTree as ET
from typing import Any, TextIO

import defusedxml.ElementTree as SafeET
import structlog
from defusedxml import DefusedXmlException
from pydantic import BaseModel, ValidationError

from xmlcodec.exceptions import ConversionError
from xmlcodec.namespaces import XmlNamespaces
from xmlcodec.serialization.writer import XmlWriter
from xmlcodec.serialization.xml_decoder import element_to_model, is_nil, local_name
from xmlcodec.serialization.xml_encoder import model_to_element, root_tag_for

logger = structlog.get_logger(__name__)


class XmlSerializer:
    """Converts instances of one Pydantic model type to and from XML.

    A serializer is cheap to build and holds no state besides its type;
    build one per call.

    Attributes:
        target_type: The model class this serializer is bound to
        root_tag: Name of the root element of serialized documents
    """

    def __init__(self, target_type: type[BaseModel]):
        if not (isinstance(target_type, type) and issubclass(target_type, BaseModel)):
            raise ConversionError(f"{target_type!r} has no XML mapping; expected a Pydantic model class")

        self.target_type = target_type
        self.root_tag = root_tag_for(target_type)
        logger.debug("Built serializer", type=target_type.__name__, root=self.root_tag)

    def serialize(
        self,
        writer: XmlWriter,
        value: BaseModel,
        namespaces: XmlNamespaces | None = None,
    ) -> None:
        """Write ``value`` to ``writer``.

        Every namespace in ``namespaces`` is declared on the root element,
        ahead of any attributes of the value itself.
        """
        if not isinstance(value, self.target_type):
            raise ConversionError(
                f"Expected an instance of {self.target_type.__name__}, got {type(value).__name__}",
                source=value,
            )

        try:
            root = model_to_element(value, self.root_tag)
        except (TypeError, ValueError) as exc:
            raise ConversionError(f"Could not serialize {type(value).__name__}: {exc}", source=value) from exc

        if namespaces:
            root.attrib = {**dict(namespaces.declarations()), **root.attrib}

        writer.write(root)

    def deserialize(self, source: ET.Element | ET.ElementTree) -> BaseModel | None:
        """Read a model from ``source``.

        Returns:
            The model instance, or None when the root is ``xsi:nil``

        Raises:
            ConversionError: If the root element is not the expected one or
                its content fails validation
        """
        element = source.getroot() if isinstance(source, ET.ElementTree) else source
        if element is None:
            raise ConversionError("Invalid XML: document has no root element", source=source)

        name = local_name(element.tag)
        if name != self.root_tag:
            raise ConversionError(
                f"<{name}> was not expected; {self.target_type.__name__} reads <{self.root_tag}>",
                source=element,
            )

        if is_nil(element):
            return None

        try:
            return element_to_model(element, self.target_type)
        except (ValidationError, TypeError, ValueError) as exc:
            raise ConversionError(f"Invalid XML for {self.target_type.__name__}: {exc}", source=element) from exc


def serializer_for(value: Any) -> XmlSerializer:
    """Build a serializer for the runtime type of ``value``."""
    return XmlSerializer(type(value))


def parse_xml(reader: TextIO) -> ET.Element:
    """Parse an XML document from a text stream.

    DTDs, entity declarations and external references are rejected.

    Raises:
        ConversionError: If the text is not well-formed or uses a
            forbidden construct
    """
    try:
        tree = SafeET.parse(reader, forbid_dtd=True)
    except ET.ParseError as exc:
        raise ConversionError(f"Malformed XML: {exc}") from exc
    except DefusedXmlException as exc:
        raise ConversionError(f"Forbidden XML construct: {exc}") from exc

    root = tree.getroot()
    logger.debug("Parsed XML document", root=root.tag)
    return root
