"""
Tree walker for Nix syntax trees.

Walks the arena produced by ``parse_nix`` and turns every identifier that is
preceded by a block comment into a ``DocItem``.

Example:
    >>> walker = TreeWalker()
    >>> items = list(walker.walk_file(Path("lib/strings.nix")))
    >>> [item.name for item in items]
    ['concatStrings', 'concatMapStrings', ...]
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from nixdoc.errors import SourceReadError
from nixdoc.logging import get_logger
from nixdoc.parser.doc_comment import DocComment, parse_doc_comment, retrieve_doc_comment
from nixdoc.parser.syntax_tree import NodeKind, SyntaxNode, SyntaxTree, parse_nix

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocItem:
    """A documented identifier, not yet assigned to a category."""

    name: str
    comment: DocComment


def retrieve_doc_item(node: SyntaxNode) -> DocItem | None:
    """Turn an identifier node with a leading block comment into a DocItem."""
    if node.kind is not NodeKind.IDENT:
        return None

    comment = retrieve_doc_comment(node.leading)
    if comment is None:
        return None

    return DocItem(name=node.text, comment=parse_doc_comment(comment))


class TreeWalker:
    """Extract documented identifiers from Nix sources.

    Architecture:
        ```
        Nix File (.nix)
              │
              ▼
        parse_nix() ──► SyntaxTree (arena, pre-order)
              │
              ▼
        for node in tree ──► IDENT nodes only
              │
              ├──► retrieve_doc_comment(node.leading)
              │         │
              │         └──► None ──► skipped
              │
              └──► parse_doc_comment() ──► DocItem
        ```

    Guardrails:
        - Undocumented identifiers are skipped, never reported as errors
        - Items are yielded in source order, never sorted
    """

    def walk(self, tree: SyntaxTree) -> Iterator[DocItem]:
        """Yield a DocItem for each documented identifier in ``tree``."""
        for node in tree:
            item = retrieve_doc_item(node)
            if item is not None:
                yield item

    def walk_source(self, source: str, path: str | None = None) -> Iterator[DocItem]:
        """Parse ``source`` and yield its DocItems.

        Raises:
            SourceParseError: If the source is not valid Nix
        """
        return self.walk(parse_nix(source, path=path))

    def walk_file(self, file_path: Path) -> Iterator[DocItem]:
        """Read, parse and walk a Nix file.

        Raises:
            SourceReadError: If the file cannot be read or is not UTF-8
            SourceParseError: If the file is not valid Nix
        """
        file_path = Path(file_path)
        if file_path.suffix != ".nix":
            logger.warning("unexpected_suffix", file=str(file_path), suffix=file_path.suffix)

        source = read_source(file_path)
        return self.walk_source(source, path=str(file_path))


def read_source(file_path: Path) -> str:
    """Read a source file as UTF-8, wrapping failures in SourceReadError."""
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(
            f"cannot read {file_path}: {e}",
            cause=e,
            context={"file": str(file_path)},
        ) from e


__all__ = [
    "DocItem",
    "TreeWalker",
    "read_source",
    "retrieve_doc_item",
]
