"""Convert XML elements to Pydantic models."""

import base64
import collections.abc
import types
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin
from pydantic import BaseModel, TypeAdapter, ValidationError

from xmlcodec.namespaces import XSI_NAMESPACE
from xmlcodec.serialization.xml_encoder import field_attribute, field_tag

XSI_NIL = f"{{{XSI_NAMESPACE}}}nil"

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def element_to_model(element: ET.Element, model_class: type[BaseModel]) -> BaseModel:
    """Read an XML element and validate it against a Pydantic model.

    Child elements are matched to fields by local name, so elements in a
    default namespace are read the same as unqualified ones. Elements with
    no matching field are ignored.

    Args:
        element: XML element holding the model's fields
        model_class: Pydantic model class to validate against

    Returns:
        Instance of model_class with data from the element

    Raises:
        ValidationError: If the element's data doesn't match the model schema
        ValueError: If a numeric field holds text that is not a number

    Example:
        >>> from pydantic import BaseModel
        >>> class Person(BaseModel):
        ...     name: str
        ...     age: int
        >>> element = ET.fromstring('<Person><name>Alice</name><age>30</age></Person>')
        >>> element_to_model(element, Person).age
        30
    """
    if not _is_pydantic_model(model_class):
        raise TypeError(f"Expected Pydantic BaseModel class, got {model_class}")

    data = _element_to_dict(element, model_class)
    return model_class.model_validate(data)


def is_nil(element: ET.Element) -> bool:
    """Check whether an element is marked ``xsi:nil="true"``."""
    return element.get(XSI_NIL) in ("true", "1")


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` part of a qualified tag."""
    if tag[:1] == "{":
        return tag.rsplit("}", 1)[-1]
    return tag


def _element_to_dict(
    element: ET.Element,
    model_class: type[BaseModel] | None = None,
    value_type: Any = None,
) -> dict:
    """Convert an XML element to a dictionary.

    Args:
        element: The XML element to convert
        model_class: Optional Pydantic model to guide type conversion
        value_type: Type of every value when no model is given (dict fields)

    Returns:
        Dictionary representation of the XML element
    """
    result = {}

    # Field type hints, keyed by element name
    field_types = {}
    if model_class is not None:
        for field_name, field_info in model_class.model_fields.items():
            tag = field_tag(field_name, field_info)
            marker = field_attribute(field_info)
            if marker is not None:
                raw = element.get(marker.name or tag)
                if raw is not None:
                    result[tag] = _text_to_value(raw, field_info.annotation)
                continue
            field_types[tag] = field_info.annotation

    for child in element:
        # Comments and processing instructions
        if not isinstance(child.tag, str):
            continue

        name = local_name(child.tag)
        if model_class is not None:
            if name not in field_types:
                continue
            field_type = field_types[name]
        else:
            field_type = value_type

        value = _element_to_value(child, field_type)

        # Handle duplicate tags (convert to list)
        if name in result:
            if _is_sequence_type(field_type) and isinstance(value, list):
                result[name].extend(value)
                continue
            if not isinstance(result[name], list):
                result[name] = [result[name]]
            result[name].append(value)
        else:
            result[name] = value

    return result


def _element_to_value(element: ET.Element, field_type: Any = None) -> Any:
    """Convert an XML element to a Python value.

    Args:
        element: The XML element to convert
        field_type: Optional type hint to guide conversion

    Returns:
        Python value (str, int, float, list, dict, or field data for a model)
    """
    if is_nil(element):
        return None

    field_type = _unwrap(field_type)

    if _is_pydantic_model(field_type):
        # Nested model - validated together with its parent
        return _element_to_dict(element, field_type)

    children = [child for child in element if isinstance(child.tag, str)]

    if children:
        # A mapping hint wins over <item> children, so a key named "item" stays a key
        if _is_dict_type(field_type):
            return _element_to_dict(element, value_type=_get_dict_value_type(field_type))

        # <item> children (or a sequence hint) indicate a list
        if _is_sequence_type(field_type) or all(local_name(child.tag) == "item" for child in children):
            return [
                _element_to_value(child, _get_item_type(field_type, index))
                for index, child in enumerate(children)
            ]

        return _element_to_dict(element, value_type=_get_dict_value_type(field_type))

    return _text_to_value(element.text, field_type)


def _text_to_value(text: str | None, field_type: Any = None) -> Any:
    """Convert the text of a leaf element or an attribute value."""
    field_type = _unwrap(field_type)

    # Strings keep their exact content, including surrounding whitespace
    if field_type is str:
        return text or ""

    if field_type is bytes:
        return _convert_text((text or "").strip(), bytes)

    members = _union_members(field_type)
    if members:
        return _convert_union(text or "", members)

    if text is None or not text.strip():
        # Empty element - check if it should be an empty container
        if _is_sequence_type(field_type):
            return []
        if _is_dict_type(field_type):
            return {}
        return None

    if field_type is None:
        # No type hint - return as string
        return text.strip()

    if _is_sequence_type(field_type):
        # Single-item sequence
        return [_text_to_value(text, _get_item_type(field_type, 0))]

    return _convert_text(text.strip(), field_type)


def _convert_text(text: str, target_type: Any) -> Any:
    """Convert text to target type.

    Types not handled here are left to Pydantic's validation.
    """
    if target_type is bool:
        # Let Pydantic decide which spellings count as true/false
        return text
    elif target_type is int:
        return int(text)
    elif target_type is float:
        return float(text)
    elif target_type is bytes:
        # binascii.Error is a ValueError
        return base64.b64decode(text, validate=True)
    elif isinstance(target_type, type) and issubclass(target_type, Enum):
        for member in target_type:
            if str(member.value) == text:
                return member
    return text


def _convert_union(text: str, members: list) -> Any:
    """Convert text to the first union member that accepts it.

    Members are tried in declaration order, so ``int | str`` reads ``"5"``
    as ``5`` while ``str | int`` reads it as ``"5"``.
    """
    for member in members:
        candidate = text if member is str else text.strip()
        try:
            return TypeAdapter(member).validate_python(_convert_text(candidate, member))
        except (ValidationError, TypeError, ValueError):
            continue

    # Nothing matched; the model's validation reports the error
    return text


def _unwrap(field_type: Any) -> Any:
    """Reduce ``Annotated[X, ...]`` and ``Optional[X]`` to ``X``."""
    if get_origin(field_type) is Annotated:
        field_type = get_args(field_type)[0]

    if get_origin(field_type) in (Union, types.UnionType):
        args = [arg for arg in get_args(field_type) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap(args[0])

    return field_type


def _union_members(field_type: Any) -> list | None:
    """Return the non-None members of a union with several of them."""
    if get_origin(field_type) not in (Union, types.UnionType):
        return None
    return [_unwrap(arg) for arg in get_args(field_type) if arg is not type(None)]


def _is_pydantic_model(field_type: Any) -> bool:
    """Check if a type is a Pydantic model."""
    try:
        return isinstance(field_type, type) and issubclass(field_type, BaseModel)
    except TypeError:
        return False


def _is_sequence_type(field_type: Any) -> bool:
    field_type = _unwrap(field_type)
    return field_type in _SEQUENCE_ORIGINS or get_origin(field_type) in _SEQUENCE_ORIGINS


def _is_dict_type(field_type: Any) -> bool:
    field_type = _unwrap(field_type)
    return field_type in _MAPPING_ORIGINS or get_origin(field_type) in _MAPPING_ORIGINS


def _get_item_type(field_type: Any, index: int) -> Any:
    """Extract the type of the item at ``index`` from a sequence type hint.

    ``tuple[int, str]`` gives a type per position; every other sequence,
    ``tuple[int, ...]`` included, has one item type.
    """
    if not _is_sequence_type(field_type):
        return None

    field_type = _unwrap(field_type)
    args = get_args(field_type)
    if not args:
        return None

    if get_origin(field_type) is tuple and not (len(args) == 2 and args[1] is Ellipsis):
        return args[index] if index < len(args) else None

    return args[0]


def _get_dict_value_type(field_type: Any) -> Any:
    """Extract the value type from a mapping type hint."""
    if _is_dict_type(field_type):
        args = get_args(_unwrap(field_type))
        return args[1] if len(args) == 2 else None

    return None
