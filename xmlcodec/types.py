"""Field markers for controlling the XML shape of models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class XmlAttribute:
    """Marks a model field to be written as an XML attribute.

    Use it as ``Annotated`` metadata:

        >>> from typing import Annotated
        >>> from pydantic import BaseModel
        >>> class Parcel(BaseModel):
        ...     id: Annotated[str, XmlAttribute()]
        ...     weight: float

    Attributes:
        name: Attribute name (defaults to the field alias or name)
    """
    name: str | None = None
