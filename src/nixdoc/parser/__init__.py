"""
Parser module for nixdoc.

Parses Nix sources into an index-addressed syntax tree and extracts
documented identifiers from it.
"""

from nixdoc.parser.doc_comment import DocComment, ParseState, parse_doc_comment, retrieve_doc_comment
from nixdoc.parser.syntax_tree import NodeKind, SyntaxNode, SyntaxTree, Trivia, TriviaKind, parse_nix
from nixdoc.parser.tree_walker import DocItem, TreeWalker, read_source, retrieve_doc_item

__all__ = [
    "DocComment",
    "ParseState",
    "parse_doc_comment",
    "retrieve_doc_comment",
    "NodeKind",
    "SyntaxNode",
    "SyntaxTree",
    "Trivia",
    "TriviaKind",
    "parse_nix",
    "DocItem",
    "TreeWalker",
    "read_source",
    "retrieve_doc_item",
]
