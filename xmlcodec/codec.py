"""Conversions between Pydantic models and XML text or elements.

Every function here is stateless: each call builds its own serializer,
reader and writer, and releases them before returning.
"""

import io
import xml.etree.ElementTree as ET
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel

from xmlcodec.exceptions import ConversionError, InvalidInputError
from xmlcodec.namespaces import XmlNamespaces
from xmlcodec.serialization import TextWriter, TreeWriter, XmlSerializer, parse_xml, serializer_for
from xmlcodec.settings import DEFAULT_WRITER_SETTINGS, WriterSettings

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Distinguishes "settings not given" from an explicit None
_DEFAULT = object()


def deserialize(node: ET.Element | ET.ElementTree, target_type: type[T]) -> T:
    """Deserialize an XML element into an instance of ``target_type``.

    Args:
        node: Element (or tree) whose root holds the serialized value
        target_type: Pydantic model class to read

    Returns:
        Instance of target_type

    Raises:
        InvalidInputError: If node or target_type is None
        ConversionError: If the element does not hold a valid target_type

    Example:
        >>> from pydantic import BaseModel
        >>> class TestOrder(BaseModel):
        ...     OrderNumber: str
        >>> element = ET.fromstring("<TestOrder><OrderNumber>AB12C</OrderNumber></TestOrder>")
        >>> deserialize(element, TestOrder).OrderNumber
        'AB12C'
    """
    if node is None:
        raise InvalidInputError("node must not be None", "node")

    if target_type is None:
        raise InvalidInputError("target_type must not be None", "target_type")

    serializer = XmlSerializer(target_type)
    value = serializer.deserialize(node)

    if not isinstance(value, target_type):
        raise ConversionError("Invalid XML", source=node)

    return value


def serialize_to_element(value: BaseModel, default_prefix: str, default_namespace: str) -> ET.Element:
    """Serialize ``value`` into a standalone XML element.

    The returned element has no parent, so it can be appended to another
    document. Its first attribute declares ``default_namespace`` under
    ``default_prefix`` (``xmlns`` itself for an empty prefix).

    Args:
        value: Pydantic model instance to serialize
        default_prefix: Prefix to declare; may be empty
        default_namespace: Namespace URI to declare

    Returns:
        The serialized root element

    Raises:
        InvalidInputError: If value or default_prefix is None, or
            default_namespace is None, empty or whitespace-only
        ConversionError: If no root element was produced
    """
    if value is None:
        raise InvalidInputError("value must not be None", "value")

    if default_prefix is None:
        raise InvalidInputError("default_prefix must not be None", "default_prefix")

    _require_text(default_namespace, "default_namespace")

    namespaces = XmlNamespaces()
    namespaces.add(default_prefix, default_namespace)

    document = ET.ElementTree()
    with TreeWriter(document) as writer:
        serializer_for(value).serialize(writer, value, namespaces)

    element = document.getroot()
    if element is None:
        raise ConversionError("Invalid XML", source=value)

    # Detach the root from its temporary document
    document._setroot(None)
    return element


def to_xml(value: Any, namespaces: XmlNamespaces, settings: WriterSettings = _DEFAULT) -> str:
    """Serialize ``value`` to XML text.

    The serializer is resolved from the runtime type of ``value``, so
    instances of derived models are written with all of their fields.

    Args:
        value: Pydantic model instance to serialize
        namespaces: Namespaces to declare on the root element
        settings: Writer settings (defaults to ``DEFAULT_WRITER_SETTINGS``)

    Returns:
        The XML text

    Raises:
        InvalidInputError: If value or namespaces is None, or settings is
            passed as None
        ConversionError: If value has no XML mapping

    Example:
        >>> from pydantic import BaseModel
        >>> class TestOrder(BaseModel):
        ...     OrderNumber: str
        >>> print(to_xml(TestOrder(OrderNumber="AB12C"), XmlNamespaces()))
        <TestOrder>
          <OrderNumber>AB12C</OrderNumber>
        </TestOrder>
    """
    if value is None:
        raise InvalidInputError("value must not be None", "value")

    if namespaces is None:
        raise InvalidInputError("namespaces must not be None", "namespaces")

    if settings is _DEFAULT:
        settings = DEFAULT_WRITER_SETTINGS
    elif settings is None:
        raise InvalidInputError("settings must not be None", "settings")

    serializer = serializer_for(value)

    buffer = io.StringIO()
    with TextWriter(buffer, settings) as writer:
        serializer.serialize(writer, value, namespaces)

    xml = buffer.getvalue()
    logger.debug("Serialized to XML", type=type(value).__name__, length=len(xml))
    return xml


def from_xml(xml: str, target_type: type) -> Any:
    """Deserialize XML text into an instance of ``target_type``.

    Asking for ``str`` returns ``xml`` itself, unparsed.

    Args:
        xml: The XML text
        target_type: Pydantic model class to read, or ``str``

    Returns:
        The deserialized value; None when the root element is
        ``xsi:nil="true"``

    Raises:
        InvalidInputError: If xml is None, empty or whitespace-only, or
            target_type is None
        ConversionError: If the text is not valid XML for target_type
    """
    _require_text(xml, "xml")

    if target_type is None:
        raise InvalidInputError("target_type must not be None", "target_type")

    if target_type is str:
        return xml

    serializer = XmlSerializer(target_type)

    with io.StringIO(xml) as reader:
        element = parse_xml(reader)

    return serializer.deserialize(element)


def from_xml_as(xml: str, target_type: type[T]) -> T | None:
    """Typed variant of :func:`from_xml`.

    Raises:
        ConversionError: If the result is not an instance of target_type,
            in addition to the errors of :func:`from_xml`
    """
    value = from_xml(xml, target_type)

    if value is not None and not isinstance(value, target_type):
        raise ConversionError(
            f"Expected {target_type.__name__}, got {type(value).__name__}", source=xml
        )

    return value


def _require_text(value: str, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} must not be None, empty or whitespace-only", name)
