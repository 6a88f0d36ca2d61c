"""Namespace prefix registry used when serializing."""

import re
from typing import Iterator, Mapping

from xmlcodec.exceptions import InvalidInputError

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

_NCNAME = re.compile(r"^[A-Za-z_][\w.\-]*$")


def is_ncname(name: str) -> bool:
    """Check whether ``name`` is an XML name without a colon."""
    return isinstance(name, str) and _NCNAME.match(name) is not None


class XmlNamespaces:
    """Ordered mapping of namespace prefixes to namespace URIs.

    Every registered pair is declared on the root element of a serialized
    document, in registration order. The empty prefix declares the default
    namespace.

    Example:
        >>> namespaces = XmlNamespaces({"ns": "urn:orders"})
        >>> namespaces.declarations()
        [('xmlns:ns', 'urn:orders')]
    """

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._namespaces: dict[str, str] = {}
        for prefix, namespace in (mapping or {}).items():
            self.add(prefix, namespace)

    @classmethod
    def default(cls) -> "XmlNamespaces":
        """Registry declaring the XML Schema instance and XML Schema namespaces."""
        return cls({"xsi": XSI_NAMESPACE, "xsd": XSD_NAMESPACE})

    def add(self, prefix: str, namespace: str) -> None:
        """Register ``namespace`` under ``prefix``, replacing any earlier URI."""
        if prefix is None:
            raise InvalidInputError("Namespace prefix must not be None", "prefix")
        if prefix and not is_ncname(prefix):
            raise InvalidInputError(f"Invalid namespace prefix: {prefix!r}", "prefix")
        if namespace is None:
            raise InvalidInputError("Namespace must not be None", "namespace")
        self._namespaces[prefix] = namespace

    def declarations(self) -> list[tuple[str, str]]:
        """Return the ``xmlns`` attributes declaring every registered namespace."""
        return [
            (f"xmlns:{prefix}" if prefix else "xmlns", namespace)
            for prefix, namespace in self._namespaces.items()
        ]

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._namespaces.items())

    def __len__(self) -> int:
        return len(self._namespaces)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._namespaces

    def __repr__(self) -> str:
        return f"XmlNamespaces({self._namespaces!r})"
