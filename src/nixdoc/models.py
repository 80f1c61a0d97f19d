"""Data models for the DocBook function reference."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from nixdoc.parser.tree_walker import DocItem


@dataclass(frozen=True)
class Parameter:
    """A single function parameter and (potentially) its documentation.

    Nothing populates parameters yet; renderers iterate the (empty) list.
    """

    name: str
    description: str | None = None
    arg_type: str | None = None


@dataclass(frozen=True)
class ManualEntry:
    """A single manual section describing a library function.

    Attributes:
        category: Function category shared by the whole run (e.g. 'strings')
        name: Identifier name, used in the section title
        fn_type: Type signature as written in the comment (unchecked)
        description: Primary description, rendered verbatim
        parameters: Parameter docs, currently always empty
    """

    category: str
    name: str
    description: str
    fn_type: str | None = None
    parameters: list[Parameter] = field(default_factory=list)

    @property
    def ident(self) -> str:
        """Fully qualified name, e.g. 'lib.strings.concat'."""
        return f"lib.{self.category}.{self.name}"

    @classmethod
    def from_doc_item(cls, item: DocItem, category: str) -> ManualEntry:
        return cls(
            category=category,
            name=item.name,
            description=item.comment.doc,
            fn_type=item.comment.doc_type,
        )


def build_entries(items: Iterable[DocItem], category: str) -> list[ManualEntry]:
    """Map DocItems to ManualEntries, keeping source order."""
    return [ManualEntry.from_doc_item(item, category) for item in items]


__all__ = ["Parameter", "ManualEntry", "build_entries"]
