"""Writers that turn a serialized element into a tree or into text."""

import xml.etree.ElementTree as ET
from typing import TextIO
from xml.sax.saxutils import escape

import structlog

from xmlcodec.exceptions import ConversionError
from xmlcodec.settings import WriterSettings

logger = structlog.get_logger(__name__)

_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


class XmlWriter:
    """Base class for writers receiving one root element.

    Writers are context managers; leaving the ``with`` block closes them on
    every exit path.
    """

    def __init__(self):
        self._closed = False
        self._written = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, element: ET.Element) -> None:
        """Write ``element`` as the document's root element."""
        if self._closed:
            raise ValueError("I/O operation on closed writer")
        if self._written:
            raise ConversionError("Writer already holds a root element", source=element)
        self._write_root(element)
        self._written = True
        logger.debug("Wrote root element", writer=type(self).__name__, root=element.tag)

    def _write_root(self, element: ET.Element) -> None:
        raise NotImplementedError

    def close(self) -> None:
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class TreeWriter(XmlWriter):
    """Writes into an ``ElementTree`` container.

    The element is replayed into a ``TreeBuilder``; the built root is set
    on the document when the writer is closed.
    """

    def __init__(self, document: ET.ElementTree):
        super().__init__()
        self._document = document
        self._builder = ET.TreeBuilder()

    def _write_root(self, element: ET.Element) -> None:
        self._replay(element)

    def _replay(self, element: ET.Element) -> None:
        self._builder.start(element.tag, dict(element.attrib))
        if element.text:
            self._builder.data(element.text)
        for child in element:
            self._replay(child)
            if child.tail:
                self._builder.data(child.tail)
        self._builder.end(element.tag)

    def close(self) -> None:
        if self._closed:
            return
        super().close()
        if self._written:
            self._document._setroot(self._builder.close())


class TextWriter(XmlWriter):
    """Writes formatted XML text to a text stream.

    Closing the writer flushes the stream but leaves it open, so the text
    of an ``io.StringIO`` can still be read afterwards.

    Example:
        >>> import io
        >>> buffer = io.StringIO()
        >>> with TextWriter(buffer, WriterSettings(omit_xml_declaration=True)) as writer:
        ...     writer.write(ET.fromstring("<a><b>1</b></a>"))
        >>> buffer.getvalue()
        '<a><b>1</b></a>'
    """

    def __init__(self, stream: TextIO, settings: WriterSettings):
        super().__init__()
        self._stream = stream
        self._settings = settings

    def _write_root(self, element: ET.Element) -> None:
        settings = self._settings
        if not settings.omit_xml_declaration:
            self._stream.write(f'<?xml version="1.0" encoding="{settings.encoding}"?>')
            if settings.indent:
                self._stream.write(settings.new_line_chars)
        self._write_element(element, 0, settings.indent)

    def _write_element(self, element: ET.Element, level: int, indent: bool) -> None:
        settings = self._settings
        write = self._stream.write
        tag = element.tag

        write(f"<{tag}")
        for name, value in element.attrib.items():
            if indent and settings.new_line_on_attributes:
                write(settings.new_line_chars + settings.indent_chars * (level + 1))
            else:
                write(" ")
            write(f'{name}="{escape(value, _ATTRIBUTE_ENTITIES)}"')

        children = list(element)
        if not children and not element.text:
            write(" />")
            return

        write(">")
        if element.text:
            write(escape(element.text, _TEXT_ENTITIES))

        # Indentation would change the content of mixed elements
        mixed = bool(element.text) or any(child.tail for child in children)
        indent_children = indent and not mixed

        for child in children:
            if indent_children:
                write(settings.new_line_chars + settings.indent_chars * (level + 1))
            self._write_element(child, level + 1, indent_children)
            if child.tail:
                write(escape(child.tail, _TEXT_ENTITIES))

        if indent_children and children:
            write(settings.new_line_chars + settings.indent_chars * level)
        write(f"</{tag}>")

    def close(self) -> None:
        if self._closed:
            return
        super().close()
        self._stream.flush()
