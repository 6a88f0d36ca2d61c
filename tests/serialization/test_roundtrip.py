"""Tests for roundtrip XML serialization (Pydantic → XML → Pydantic)."""

import xml.etree.ElementTree as ET
from typing import Annotated

import pytest
from pydantic import BaseModel
from datetime import datetime, date
from enum import Enum

from xmlcodec import (
    WriterSettings,
    XmlAttribute,
    XmlNamespaces,
    deserialize,
    from_xml,
    serialize_to_element,
    to_xml,
)


class SimpleModel(BaseModel):
    """Simple test model."""
    name: str
    age: int


class OptionalModel(BaseModel):
    """Model with optional fields."""
    required: str
    optional: str | None = None
    count: int | None = None


class NestedModel(BaseModel):
    """Model with nested structure."""
    title: str
    person: SimpleModel


class ListModel(BaseModel):
    """Model with lists."""
    tags: list[str]
    scores: list[int]


class Color(Enum):
    """Test enum."""
    RED = "red"
    BLUE = "blue"


class MixedModel(BaseModel):
    """Model with various field types."""
    name: str
    age: int
    active: bool
    ratio: float
    color: Color
    created: datetime
    birthday: date
    tags: list[str]
    metadata: dict[str, str]


class Parcel(BaseModel):
    """Model with attribute fields."""
    id: Annotated[str, XmlAttribute()]
    fragile: Annotated[bool, XmlAttribute()] = False
    contents: list[SimpleModel] = []


class CollectionModel(BaseModel):
    """Model with set, frozenset and tuple fields."""
    labels: set[str]
    codes: frozenset[int]
    history: tuple[int, ...]
    pair: tuple[str, int]


class BinaryModel(BaseModel):
    """Model with bytes in an element and an attribute."""
    checksum: Annotated[bytes, XmlAttribute()]
    payload: bytes


class ChoiceModel(BaseModel):
    """Model with fields typed as unions of several scalars."""
    code: int | str
    label: str | int | None = None


class CounterModel(BaseModel):
    """Model with a dict whose keys may be named like list items."""
    counts: dict[str, int]


SETTINGS = [
    WriterSettings(),
    WriterSettings(indent=True),
    WriterSettings(indent=True, new_line_on_attributes=True, omit_xml_declaration=True),
    WriterSettings(indent=True, indent_chars="\t", new_line_chars="\r\n"),
]

MODELS = [
    SimpleModel(name="Alice", age=30),
    OptionalModel(required="test", optional="value", count=42),
    OptionalModel(required="test"),
    NestedModel(title="Profile", person=SimpleModel(name="Bob", age=25)),
    ListModel(tags=["python", "ai", "ml"], scores=[95, 87, 92]),
    ListModel(tags=[], scores=[]),
    MixedModel(
        name="Test",
        age=25,
        active=True,
        ratio=0.25,
        color=Color.BLUE,
        created=datetime(2024, 1, 15, 10, 30),
        birthday=date(1990, 5, 20),
        tags=["a", "b", "c"],
        metadata={"source": "api", "region": "eu"},
    ),
    Parcel(
        id="P-1",
        fragile=True,
        contents=[SimpleModel(name="Cup", age=1), SimpleModel(name="Plate", age=2)],
    ),
    CollectionModel(labels={"b", "a", "c"}, codes=frozenset({3, 1}), history=(4, 5, 6), pair=("x", 1)),
    CollectionModel(labels=set(), codes=frozenset(), history=(), pair=("", 0)),
    CollectionModel(labels={"only"}, codes=frozenset({7}), history=(7,), pair=("y", 2)),
    BinaryModel(checksum=b"\x00\xff", payload=b"hello <world> \x01"),
    BinaryModel(checksum=b"", payload=b""),
    ChoiceModel(code=5),
    ChoiceModel(code="A-5", label="007"),
    ChoiceModel(code=" spaced ", label=" "),
    CounterModel(counts={"item": 3}),
    CounterModel(counts={"item": 1, "other": 2}),
]


@pytest.mark.parametrize("original", MODELS, ids=lambda m: type(m).__name__)
def test_text_roundtrip(original):
    """Test that to_xml followed by from_xml reproduces the model."""
    xml = to_xml(original, XmlNamespaces({"ns": "urn:test"}))
    restored = from_xml(xml, type(original))

    assert restored == original


@pytest.mark.parametrize("settings", SETTINGS)
def test_roundtrip_any_settings(settings):
    """Test that every writer configuration reads back."""
    original = MODELS[6]

    xml = to_xml(original, XmlNamespaces.default(), settings)

    assert from_xml(xml, MixedModel) == original


@pytest.mark.parametrize("original", MODELS, ids=lambda m: type(m).__name__)
def test_element_roundtrip(original):
    """Test that serialize_to_element followed by deserialize reproduces the model."""
    element = serialize_to_element(original, "ns", "urn:test")

    document = ET.ElementTree(ET.Element("Envelope"))
    document.getroot().append(element)

    assert deserialize(document.getroot()[0], type(original)) == original


def test_mixed_types_roundtrip():
    """Test that field types are restored."""
    restored = from_xml(to_xml(MODELS[6], XmlNamespaces()), MixedModel)

    assert isinstance(restored.age, int)
    assert isinstance(restored.active, bool)
    assert isinstance(restored.color, Color)
    assert isinstance(restored.created, datetime)
    assert isinstance(restored.tags, list)


def test_multiple_roundtrips():
    """Test that multiple roundtrips preserve data."""
    original = NestedModel(title="Test", person=SimpleModel(name="Charlie", age=35))

    xml1 = to_xml(original, XmlNamespaces())
    restored1 = from_xml(xml1, NestedModel)

    xml2 = to_xml(restored1, XmlNamespaces())
    restored2 = from_xml(xml2, NestedModel)

    assert restored2 == original
    assert xml1 == xml2


def test_complex_nested_roundtrip():
    """Test complex nested structure."""
    class Address(BaseModel):
        street: str
        city: str

    class Company(BaseModel):
        name: str
        address: Address

    class Employee(BaseModel):
        name: str
        age: int
        company: Company

    original = Employee(
        name="Alice",
        age=30,
        company=Company(
            name="TechCorp",
            address=Address(street="123 Main St", city="Boston")
        )
    )

    xml = to_xml(original, XmlNamespaces())
    restored = from_xml(xml, Employee)

    assert restored == original
    assert restored.company.address.city == "Boston"


def test_collection_types_restored():
    """Test that sets, frozensets and tuples come back as their own types."""
    original = CollectionModel(labels={"b", "a"}, codes=frozenset({2, 1}), history=(9, 8), pair=("z", 3))

    restored = from_xml(to_xml(original, XmlNamespaces()), CollectionModel)

    assert isinstance(restored.labels, set)
    assert isinstance(restored.codes, frozenset)
    assert restored.history == (9, 8)
    assert restored.pair == ("z", 3)


def test_union_members_restored_in_declaration_order():
    """Test that a union field reads back as the first member accepting the text."""
    restored = from_xml(to_xml(ChoiceModel(code=12, label="12"), XmlNamespaces()), ChoiceModel)

    assert restored.code == 12
    assert isinstance(restored.code, int)
    assert restored.label == "12"


def test_set_output_is_sorted():
    """Test that set items are written in a stable order."""
    xml = to_xml(CollectionModel(labels={"c", "a", "b"}, codes=frozenset(), history=(), pair=("p", 0)), XmlNamespaces())

    assert xml.index("<item>a</item>") < xml.index("<item>b</item>") < xml.index("<item>c</item>")
