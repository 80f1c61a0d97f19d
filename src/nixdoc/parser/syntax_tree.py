"""
Nix syntax tree arena.

Parses Nix source with tree-sitter and flattens the concrete syntax tree into
an arena of ``SyntaxNode`` objects addressed by integer index. Nodes are
stored in pre-order, so iterating the arena visits tokens in source order.

Comments and whitespace are not nodes: they are attached to the following
token as *leading trivia*, the way documentation comments sit in front of the
binding they describe.

Example:
    >>> tree = parse_nix("{ /* Doubles. */ double = x: x * 2; }")
    >>> ident = next(tree.idents())
    >>> ident.text, ident.leading[-2].content
    ('double', ' Doubles. ')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from tree_sitter_language_pack import get_parser

from nixdoc.errors import SourceParseError


class TriviaKind(str, Enum):
    """Kind of a leading trivia item."""

    COMMENT = "comment"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class Trivia:
    """A comment or whitespace run preceding a token.

    Attributes:
        kind: COMMENT or WHITESPACE
        content: Comment text without its delimiters, or the whitespace itself
        multiline: True for block comments (``/* ... */``)
    """

    kind: TriviaKind
    content: str
    multiline: bool = False


class NodeKind(str, Enum):
    """Classification of arena nodes."""

    IDENT = "ident"
    TOKEN = "token"
    NODE = "node"


@dataclass
class SyntaxNode:
    """A single node in the arena.

    Attributes:
        index: Position in the arena
        kind: IDENT for identifiers, TOKEN for other leaves, NODE for composites
        node_type: Grammar node type (e.g. 'binding', 'identifier', '=')
        text: Source text of leaves; empty for composite nodes
        parent: Arena index of the parent, None for the root
        children: Arena indices of the children, in source order
        leading: Comments and whitespace immediately before this token
        line: 1-based line of the node start
        column: 1-based column of the node start
    """

    index: int
    kind: NodeKind
    node_type: str
    text: str = ""
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    leading: tuple[Trivia, ...] = ()
    line: int = 1
    column: int = 1


class SyntaxTree:
    """Arena of syntax nodes in pre-order.

    Children reference each other by index, never by object, so the tree can
    be walked with a flat loop regardless of nesting depth.
    """

    def __init__(self) -> None:
        self._nodes: list[SyntaxNode] = []

    def add(
        self,
        kind: NodeKind,
        node_type: str,
        *,
        text: str = "",
        parent: int | None = None,
        leading: tuple[Trivia, ...] = (),
        line: int = 1,
        column: int = 1,
    ) -> SyntaxNode:
        """Append a node, linking it to its parent."""
        node = SyntaxNode(
            index=len(self._nodes),
            kind=kind,
            node_type=node_type,
            text=text,
            parent=parent,
            leading=leading,
            line=line,
            column=column,
        )
        self._nodes.append(node)
        if parent is not None:
            self._nodes[parent].children.append(node.index)
        return node

    @property
    def root(self) -> SyntaxNode:
        if not self._nodes:
            raise IndexError("empty syntax tree")
        return self._nodes[0]

    def idents(self) -> Iterator[SyntaxNode]:
        """Yield identifier nodes in source order."""
        return (node for node in self._nodes if node.kind is NodeKind.IDENT)

    def __iter__(self) -> Iterator[SyntaxNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> SyntaxNode:
        return self._nodes[index]


def _comment_trivia(text: str) -> Trivia:
    if text.startswith("/*"):
        content = text[2:-2] if text.endswith("*/") and len(text) >= 4 else text[2:]
        return Trivia(TriviaKind.COMMENT, content, multiline=True)
    return Trivia(TriviaKind.COMMENT, text[1:], multiline=False)


def _first_error(root) -> tuple[int, int]:
    """Locate the first ERROR or missing node (1-based line, column)."""
    cursor = root.walk()
    while True:
        node = cursor.node
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point
            return row + 1, column + 1
        if node.has_error and cursor.goto_first_child():
            continue
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                row, column = root.start_point
                return row + 1, column + 1


def build_tree(ts_tree, source: bytes) -> SyntaxTree:
    """Flatten a tree-sitter tree into a ``SyntaxTree`` arena.

    Args:
        ts_tree: Tree returned by ``tree_sitter.Parser.parse``
        source: The UTF-8 bytes that were parsed

    Returns:
        SyntaxTree with comments and whitespace folded into leading trivia
    """
    tree = SyntaxTree()
    pending: list[Trivia] = []
    offset = 0
    parents: list[int] = []

    def take_gap(start: int) -> None:
        gap = source[offset:start].decode("utf-8")
        if gap:
            pending.append(Trivia(TriviaKind.WHITESPACE, gap))

    cursor = ts_tree.walk()
    while True:
        node = cursor.node
        row, column = node.start_point
        parent = parents[-1] if parents else None

        if node.type == "comment":
            take_gap(node.start_byte)
            text = source[node.start_byte:node.end_byte].decode("utf-8")
            pending.append(_comment_trivia(text))
            offset = node.end_byte
        elif node.child_count == 0 and parent is not None:
            take_gap(node.start_byte)
            kind = NodeKind.IDENT if node.type == "identifier" else NodeKind.TOKEN
            tree.add(
                kind,
                node.type,
                text=source[node.start_byte:node.end_byte].decode("utf-8"),
                parent=parent,
                leading=tuple(pending),
                line=row + 1,
                column=column + 1,
            )
            pending.clear()
            offset = node.end_byte
        else:
            added = tree.add(
                NodeKind.NODE, node.type, parent=parent, line=row + 1, column=column + 1
            )
            if cursor.goto_first_child():
                parents.append(added.index)
                continue

        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                return tree
            parents.pop()


def parse_nix(source: str, path: str | None = None) -> SyntaxTree:
    """Parse Nix source into a ``SyntaxTree``.

    Args:
        source: Nix source text
        path: Optional file path, used in error messages only

    Returns:
        The flattened syntax tree

    Raises:
        SourceParseError: If the source contains syntax errors
    """
    data = source.encode("utf-8")
    ts_tree = get_parser("nix").parse(data)

    if ts_tree.root_node.has_error:
        line, column = _first_error(ts_tree.root_node)
        where = f"{path}:{line}:{column}" if path else f"line {line}, column {column}"
        raise SourceParseError(
            f"syntax error at {where}",
            line=line,
            column=column,
            context={"file": path} if path else None,
        )

    return build_tree(ts_tree, data)


__all__ = [
    "TriviaKind",
    "Trivia",
    "NodeKind",
    "SyntaxNode",
    "SyntaxTree",
    "build_tree",
    "parse_nix",
]
