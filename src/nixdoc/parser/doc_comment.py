"""
Documentation comment classifier and parser.

A documentation comment is the first block comment (``/* ... */``) in front
of an identifier. Its text is split into a free-text description, an
optional ``Type:`` signature and an optional ``Example:`` block.

Example:
    >>> comment = parse_doc_comment('''
    ...     @doc Doubles a number.
    ...     Type:
    ...       int -> int
    ... ''')
    >>> comment.doc, comment.doc_type, comment.example
    ('Doubles a number.', 'int -> int', None)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from nixdoc.parser.syntax_tree import Trivia, TriviaKind

DOC_MARKER = "@doc "
TYPE_MARKER = "Type:"
EXAMPLE_MARKER = "Example:"


@dataclass(frozen=True)
class DocComment:
    """Parsed documentation payload.

    Attributes:
        doc: Primary description, trimmed (may be empty)
        doc_type: Type annotation on a single line, if any
        example: Usage example block, if any
    """

    doc: str
    doc_type: str | None = None
    example: str | None = None


class ParseState(Enum):
    DOC = "doc"
    TYPE = "type"
    EXAMPLE = "example"


def retrieve_doc_comment(leading: Iterable[Trivia]) -> str | None:
    """Return the content of the first block comment in ``leading``.

    Line comments and whitespace are skipped. Every block comment is a
    documentation candidate; its content is not inspected.
    """
    for item in leading:
        if item.kind is TriviaKind.COMMENT and item.multiline:
            return item.content
    return None


def _is_doc_marker(line: str) -> bool:
    return line.startswith(DOC_MARKER) or line == DOC_MARKER.rstrip()


def _strip_repeated(line: str, prefix: str) -> str:
    """Remove every leading repetition of ``prefix``."""
    while line.startswith(prefix):
        line = line[len(prefix):]
    return line


def parse_doc_comment(raw: str) -> DocComment:
    """Parse raw comment content into a ``DocComment``.

    Lines are classified by a three-state machine. ``@doc``, ``Type:`` and
    ``Example:`` switch state and are stripped from their line; the rest of
    the line goes to the current state's buffer. ``Type:`` lines are joined
    without a separator, so a signature spread over several lines comes out
    as one line.
    """
    doc: list[str] = []
    doc_type: list[str] = []
    example: list[str] = []
    state = ParseState.DOC

    for line in raw.strip().split("\n"):
        line = line.strip()

        if _is_doc_marker(line):
            state = ParseState.DOC
            line = _strip_repeated(line, DOC_MARKER)
            if line == DOC_MARKER.rstrip():
                line = ""

        if line.startswith(TYPE_MARKER):
            state = ParseState.TYPE
            line = line[len(TYPE_MARKER):]

        if line.startswith(EXAMPLE_MARKER):
            state = ParseState.EXAMPLE
            line = _strip_repeated(line, EXAMPLE_MARKER)

        if state is ParseState.TYPE:
            doc_type.append(line.strip())
        elif state is ParseState.DOC:
            doc.append(line.strip() + "\n")
        else:
            example.append(line.strip() + "\n")

    return DocComment(
        doc="".join(doc).strip(),
        doc_type="".join(doc_type).strip() or None,
        example="".join(example).strip() or None,
    )


__all__ = [
    "DocComment",
    "ParseState",
    "retrieve_doc_comment",
    "parse_doc_comment",
]
