"""
Event-style XML writer.

``DocBookWriter`` accepts start-element / characters / end-element events and
writes them to a text stream as they arrive, indenting nested elements.
Used as a context manager it always closes every open element, so an
aborted run still leaves a well-formed document behind.

Example:
    >>> with DocBookWriter(sys.stdout) as w:
    ...     w.start_element("para")
    ...     w.characters("Hello & goodbye")
    ...     w.end_element()
    <?xml version="1.0" encoding="utf-8"?>
    <para>Hello &amp; goodbye</para>
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, TextIO
from xml.sax.saxutils import escape, quoteattr

from nixdoc.errors import RenderError
from nixdoc.logging import get_logger

logger = get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


@dataclass
class _OpenElement:
    name: str
    tag_pending: bool = True
    wrote_markup: bool = False
    wrote_text: bool = False


class DocBookWriter:
    """Streaming XML writer with indentation.

    Elements with text content stay on one line, elements with child
    elements put each child on its own indented line, and elements without
    content are written as ``<name />``.

    Args:
        stream: Text stream to write to
        indent: Indentation per nesting level; empty string disables it
        write_declaration: Emit the XML declaration before the first element
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        indent: str = "  ",
        write_declaration: bool = True,
    ):
        self._stream = stream
        self._indent = indent
        self._write_declaration = write_declaration
        self._stack: list[_OpenElement] = []
        self._wrote_anything = False
        self._closed = False

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._stack)

    def _write(self, text: str) -> None:
        try:
            self._stream.write(text)
        except OSError as e:
            raise RenderError(f"failed to write document: {e}", cause=e) from e

    def _flush(self) -> None:
        try:
            self._stream.flush()
        except OSError as e:
            raise RenderError(f"failed to flush document: {e}", cause=e) from e

    def _newline(self, level: int) -> None:
        if self._indent:
            self._write("\n" + self._indent * level)

    def _finish_pending_tag(self) -> None:
        if self._stack and self._stack[-1].tag_pending:
            self._write(">")
            self._stack[-1].tag_pending = False

    def start_element(self, name: str, attributes: Mapping[str, str] | None = None) -> None:
        """Open an element, writing its attributes in the given order."""
        if self._closed:
            raise RenderError(f"cannot start <{name}>: writer is closed")
        if not self._wrote_anything and self._write_declaration:
            self._write(XML_DECLARATION)
            self._wrote_anything = True

        self._finish_pending_tag()
        if self._stack:
            parent = self._stack[-1]
            if not parent.wrote_text:
                self._newline(len(self._stack))
            parent.wrote_markup = True
        elif self._wrote_anything:
            self._newline(0)

        attrs = "".join(f" {key}={quoteattr(str(value))}" for key, value in (attributes or {}).items())
        self._write(f"<{name}{attrs}")
        self._stack.append(_OpenElement(name))
        self._wrote_anything = True

    def characters(self, text: str) -> None:
        """Write escaped character data inside the current element."""
        if not self._stack:
            raise RenderError("character data outside of an element")
        self._finish_pending_tag()
        self._write(escape(text))
        self._stack[-1].wrote_text = True

    def end_element(self) -> None:
        """Close the innermost open element."""
        if not self._stack:
            raise RenderError("end_element() without an open element")

        element = self._stack[-1]
        if element.tag_pending:
            self._write(" />")
        else:
            if element.wrote_markup and not element.wrote_text:
                self._newline(len(self._stack) - 1)
            self._write(f"</{element.name}>")
        self._stack.pop()
        self._flush()

    def close(self) -> None:
        """Close all open elements and flush the stream."""
        if self._closed:
            return
        while self._stack:
            self.end_element()
        if self._wrote_anything:
            self._write("\n")
        self._closed = True
        self._flush()

    def __enter__(self) -> DocBookWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return

        if self._stack:
            logger.warning("closing_open_elements", depth=len(self._stack), error=str(exc))
        try:
            self.close()
        except RenderError as close_error:
            logger.error("close_failed", error=str(close_error))


__all__ = ["DocBookWriter", "XML_DECLARATION"]
