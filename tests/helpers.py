"""Helpers shared by the nixdoc tests."""

from xml.etree import ElementTree

from nixdoc.parser.syntax_tree import Trivia, TriviaKind

DOCBOOK = "{http://docbook.org/ns/docbook}"
XML_ID = "{http://www.w3.org/XML/1998/namespace}id"


def block(content: str) -> Trivia:
    return Trivia(TriviaKind.COMMENT, content, multiline=True)


def line_comment(content: str) -> Trivia:
    return Trivia(TriviaKind.COMMENT, content, multiline=False)


def whitespace(content: str = "\n  ") -> Trivia:
    return Trivia(TriviaKind.WHITESPACE, content)


def parse_docbook(text: str) -> ElementTree.Element:
    """Parse rendered output, checking it is well-formed."""
    return ElementTree.fromstring(text.encode("utf-8"))
