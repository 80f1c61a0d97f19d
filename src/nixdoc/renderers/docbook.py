"""
DocBook renderer for the Nix function library reference.

Writes one ``<section>`` per ``ManualEntry`` inside a wrapping section for
the whole category. All output goes through a ``DocBookWriter``.
"""

from __future__ import annotations

from typing import Iterable

from nixdoc.logging import get_logger
from nixdoc.models import ManualEntry, Parameter
from nixdoc.renderers.xml_writer import DocBookWriter

logger = get_logger(__name__)

DOCBOOK_NAMESPACES = {
    "xmlns": "http://docbook.org/ns/docbook",
    "xmlns:xlink": "http://www.w3.org/1999/xlink",
    "xmlns:xi": "http://www.w3.org/2001/XInclude",
}


def _text_element(writer: DocBookWriter, name: str, text: str) -> None:
    writer.start_element(name)
    writer.characters(text)
    writer.end_element()


def _write_parameters(parameters: list[Parameter], writer: DocBookWriter) -> None:
    writer.start_element("variablelist")
    for param in parameters:
        writer.start_element("varlistentry")
        writer.start_element("term")
        _text_element(writer, "varname", param.name)
        writer.end_element()
        writer.start_element("listitem")
        _text_element(writer, "para", param.description or "")
        writer.end_element()
        writer.end_element()
    writer.end_element()


def write_section_xml(entry: ManualEntry, writer: DocBookWriter) -> None:
    """Write a single DocBook section for a documented Nix function.

    Layout::

        <section xml:id="function-library-lib.CATEGORY.NAME">
          <title>
            <function>lib.CATEGORY.NAME</function>
          </title>
          <subtitle>                        (only with a type)
            <literal>TYPE</literal>
          </subtitle>
          <para>DESCRIPTION</para>
        </section>
    """
    ident = entry.ident

    writer.start_element("section", {"xml:id": f"function-library-{ident}"})

    writer.start_element("title")
    _text_element(writer, "function", ident)
    writer.end_element()

    if entry.fn_type is not None:
        writer.start_element("subtitle")
        _text_element(writer, "literal", entry.fn_type)
        writer.end_element()

    _text_element(writer, "para", entry.description)

    if entry.parameters:
        _write_parameters(entry.parameters, writer)

    writer.end_element()


class DocBookRenderer:
    """Render a category of manual entries as a DocBook section.

    Architecture:
        ```
        <section xmlns=... xml:id="sec-functions-library-CATEGORY">
          <title>DESCRIPTION</title>
          write_section_xml(entry)  ──► one nested section per entry
        </section>
        ```

    Entries are written in the order given; the renderer never sorts.
    """

    def __init__(self, category: str, description: str):
        self.category = category
        self.description = description

    @property
    def section_id(self) -> str:
        return f"sec-functions-library-{self.category}"

    def render(self, entries: Iterable[ManualEntry], writer: DocBookWriter) -> int:
        """Write the wrapping section and all entries.

        Returns:
            Number of entries written
        """
        writer.start_element("section", {**DOCBOOK_NAMESPACES, "xml:id": self.section_id})
        _text_element(writer, "title", self.description)

        count = 0
        for entry in entries:
            write_section_xml(entry, writer)
            count += 1
            logger.debug("entry_written", ident=entry.ident)

        writer.end_element()
        return count


__all__ = ["DOCBOOK_NAMESPACES", "DocBookRenderer", "write_section_xml"]
