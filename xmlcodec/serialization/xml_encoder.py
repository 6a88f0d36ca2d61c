"""Convert Pydantic models to XML elements."""

import base64
import xml.etree.ElementTree as ET
from typing import Any
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from datetime import datetime, date
from enum import Enum

from xmlcodec.namespaces import is_ncname
from xmlcodec.types import XmlAttribute

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def model_to_element(model: BaseModel, root_tag: str | None = None) -> ET.Element:
    """Convert a Pydantic model to an XML element.

    Fields are read from the model's runtime type, so instances of derived
    models keep the fields their base does not declare.

    Args:
        model: The Pydantic model instance to convert
        root_tag: The tag name for the root element (defaults to the
            model's ``__xml_root__`` or class name)

    Returns:
        Root element holding the model's fields

    Example:
        >>> from pydantic import BaseModel
        >>> class Person(BaseModel):
        ...     name: str
        ...     age: int
        >>> element = model_to_element(Person(name="Alice", age=30))
        >>> ET.tostring(element, encoding="unicode")
        '<Person><name>Alice</name><age>30</age></Person>'
    """
    if not isinstance(model, BaseModel):
        raise TypeError(f"Expected Pydantic BaseModel instance, got {type(model)}")

    root = ET.Element(root_tag or root_tag_for(type(model)))
    _model_to_element(root, model)
    return root


def root_tag_for(model_class: type[BaseModel]) -> str:
    """Return the root element name used for ``model_class``."""
    return getattr(model_class, "__xml_root__", None) or model_class.__name__


def field_tag(field_name: str, field_info: FieldInfo) -> str:
    """Return the element name used for a model field."""
    return field_info.alias or field_name


def field_attribute(field_info: FieldInfo) -> XmlAttribute | None:
    """Return the ``XmlAttribute`` marker of a field, if it has one."""
    return next((m for m in field_info.metadata if isinstance(m, XmlAttribute)), None)


def _model_to_element(parent: ET.Element, model: BaseModel) -> None:
    """Convert a Pydantic model to XML attributes and elements under parent."""
    for field_name, field_info in type(model).model_fields.items():
        value = getattr(model, field_name)

        # Skip None values for optional fields (but not empty lists)
        if value is None:
            continue

        tag = field_tag(field_name, field_info)

        marker = field_attribute(field_info)
        if marker is not None:
            parent.set(marker.name or tag, format_text(value))
            continue

        # Include empty collections as empty elements
        if isinstance(value, (*SEQUENCE_TYPES, dict)) and len(value) == 0:
            ET.SubElement(parent, tag)
            continue

        field_element = ET.SubElement(parent, tag)
        _value_to_element(field_element, value)


def _value_to_element(element: ET.Element, value: Any) -> None:
    """Convert a value to XML content within element."""
    if value is None:
        # Empty element for None
        return

    elif isinstance(value, BaseModel):
        # Nested model, written with the fields of its runtime type
        _model_to_element(element, value)

    elif isinstance(value, dict):
        # Dictionary - each key becomes a sub-element
        for key, val in value.items():
            name = format_text(key)
            if not is_ncname(name):
                raise ValueError(f"Dictionary key {key!r} is not a valid XML element name")
            item_element = ET.SubElement(element, name)
            _value_to_element(item_element, val)

    elif isinstance(value, SEQUENCE_TYPES):
        # List/tuple/set - each item becomes an <item> sub-element
        for item in _ordered(value):
            item_element = ET.SubElement(element, "item")
            _value_to_element(item_element, item)

    else:
        element.text = format_text(value)


def _ordered(value: Any) -> list:
    """Return the items of a collection, sorting sets when their items allow it."""
    if not isinstance(value, (set, frozenset)):
        return list(value)
    try:
        return sorted(value)
    except TypeError:
        return sorted(value, key=format_text)


def format_text(value: Any) -> str:
    """Format a scalar value as element text or attribute value."""
    if isinstance(value, (datetime, date)):
        # ISO format for datetime and date
        return value.isoformat()

    elif isinstance(value, Enum):
        return str(value.value)

    elif isinstance(value, bool):
        # Boolean as lowercase string
        return str(value).lower()

    elif isinstance(value, str):
        return value

    elif isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")

    # Numbers and anything else with a faithful str()
    return str(value)
