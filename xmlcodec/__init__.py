"""xmlcodec - convert Pydantic models to and from XML.

xmlcodec wraps a small XML serialization engine behind four stateless
operations: reading a model from an element, writing a model to a
standalone element with a namespace declaration, and the same two
conversions for XML text.
"""

from xmlcodec._version import __version__
from xmlcodec.codec import deserialize, from_xml, from_xml_as, serialize_to_element, to_xml
from xmlcodec.exceptions import ConversionError, InvalidInputError, XmlCodecError
from xmlcodec.namespaces import XSD_NAMESPACE, XSI_NAMESPACE, XmlNamespaces
from xmlcodec.serialization import XmlSerializer, element_to_model, model_to_element
from xmlcodec.settings import DEFAULT_WRITER_SETTINGS, WriterSettings
from xmlcodec.types import XmlAttribute

__all__ = [
    "__version__",
    "deserialize",
    "serialize_to_element",
    "to_xml",
    "from_xml",
    "from_xml_as",
    "XmlNamespaces",
    "XSI_NAMESPACE",
    "XSD_NAMESPACE",
    "WriterSettings",
    "DEFAULT_WRITER_SETTINGS",
    "XmlAttribute",
    "XmlSerializer",
    "model_to_element",
    "element_to_model",
    "XmlCodecError",
    "InvalidInputError",
    "ConversionError",
]
