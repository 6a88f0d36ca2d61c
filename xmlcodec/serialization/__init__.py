"""XML serialization engine for Pydantic models."""

from xmlcodec.serialization.xml_encoder import model_to_element
from xmlcodec.serialization.xml_decoder import element_to_model
from xmlcodec.serialization.serializer import XmlSerializer, parse_xml, serializer_for
from xmlcodec.serialization.writer import TextWriter, TreeWriter, XmlWriter

__all__ = [
    "model_to_element",
    "element_to_model",
    "XmlSerializer",
    "serializer_for",
    "parse_xml",
    "XmlWriter",
    "TreeWriter",
    "TextWriter",
]
