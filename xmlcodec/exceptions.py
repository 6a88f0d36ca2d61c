"""Exception classes for xmlcodec."""

from typing import Any


class XmlCodecError(Exception):
    """Base exception for all xmlcodec errors."""


class InvalidInputError(XmlCodecError, ValueError):
    """Raised when a required argument is missing, empty or whitespace-only.

    This exception is raised before any XML is read or written.

    Attributes:
        message: Human-readable error description
        argument: Name of the offending argument (optional)
    """

    def __init__(self, message: str, argument: str | None = None):
        super().__init__(message)
        self.argument = argument


class ConversionError(XmlCodecError):
    """Raised when a value cannot be converted to or from XML.

    Covers malformed XML, unexpected root elements, values that fail model
    validation, and types that have no XML mapping. The underlying error,
    if any, is chained as ``__cause__``.

    Attributes:
        message: Human-readable error description
        source: The XML text or element that failed to convert (optional)
    """

    def __init__(self, message: str, source: Any = None):
        super().__init__(message)
        self.source = source
