"""
Renderers module for nixdoc.

Provides the streaming XML writer and the DocBook renderer that turns
manual entries into library reference sections.
"""

from nixdoc.renderers.docbook import DOCBOOK_NAMESPACES, DocBookRenderer, write_section_xml
from nixdoc.renderers.xml_writer import XML_DECLARATION, DocBookWriter

__all__ = [
    "DOCBOOK_NAMESPACES",
    "DocBookRenderer",
    "DocBookWriter",
    "XML_DECLARATION",
    "write_section_xml",
]
