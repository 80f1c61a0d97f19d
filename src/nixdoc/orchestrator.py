"""
Documentation Orchestrator.

Coordinates a nixdoc run: read the Nix file, parse it, extract documented
identifiers, build manual entries and render them to a stream.

Example:
    >>> config = NixdocConfig(file="lib/strings.nix", category="strings",
    ...                       description="String manipulation functions")
    >>> DocumentationOrchestrator(config).generate(sys.stdout)
    12
"""

from __future__ import annotations

from typing import TextIO

from nixdoc.config import NixdocConfig
from nixdoc.logging import LogContext, get_logger
from nixdoc.models import ManualEntry, build_entries
from nixdoc.parser.syntax_tree import SyntaxTree, parse_nix
from nixdoc.parser.tree_walker import DocItem, TreeWalker, read_source
from nixdoc.renderers.docbook import DocBookRenderer
from nixdoc.renderers.xml_writer import DocBookWriter

logger = get_logger(__name__)


class DocumentationOrchestrator:
    """Orchestrate one documentation run for one Nix file.

    Architecture:
        ```
        DocumentationOrchestrator.generate(stream)
              │
              ├──► read_source()     ──► str           (SourceReadError)
              ├──► parse()           ──► SyntaxTree    (SourceParseError)
              ├──► extract()         ──► [DocItem]
              ├──► build_entries()   ──► [ManualEntry]
              │
              └──► with DocBookWriter(stream):
                        DocBookRenderer.render()       (RenderError)
        ```

    Guardrails:
        - Everything before rendering completes before the first byte is
          written, so read and parse failures never leave partial output
        - The writer closes every open element even when rendering fails
    """

    def __init__(self, config: NixdocConfig, walker: TreeWalker | None = None):
        config.validate()
        self.config = config
        self.walker = walker or TreeWalker()

    def read_source(self) -> str:
        return read_source(self.config.file)

    def parse(self) -> SyntaxTree:
        source = self.read_source()
        return parse_nix(source, path=str(self.config.file))

    def extract(self) -> list[DocItem]:
        items = list(self.walker.walk(self.parse()))
        logger.info("items_extracted", count=len(items))
        return items

    def build_entries(self) -> list[ManualEntry]:
        return build_entries(self.extract(), self.config.category)

    def generate(self, stream: TextIO) -> int:
        """Run the whole pipeline, writing the DocBook document to ``stream``.

        Returns:
            Number of entries written

        Raises:
            NixdocError: On the first read, parse or render failure
        """
        with LogContext(file=str(self.config.file), category=self.config.category):
            entries = self.build_entries()

            renderer = DocBookRenderer(self.config.category, self.config.description)
            writer = DocBookWriter(
                stream,
                indent=self.config.indent_string,
                write_declaration=self.config.write_declaration,
            )
            with writer:
                count = renderer.render(entries, writer)

            logger.info("document_written", entries=count)
            return count


__all__ = ["DocumentationOrchestrator"]
