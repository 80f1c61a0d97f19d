"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
import structlog

from helpers import whitespace
from nixdoc.logging import clear_context
from nixdoc.parser.syntax_tree import NodeKind, SyntaxTree


@pytest.fixture(scope="session")
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def strings_nix(fixtures_path):
    """Nix file with three documented and several undocumented bindings."""
    return fixtures_path / "strings.nix"


@pytest.fixture(scope="session")
def broken_nix(fixtures_path):
    """Nix file with a syntax error."""
    return fixtures_path / "broken.nix"


@pytest.fixture
def double_source():
    """Single documented binding used in end-to-end tests."""
    return (
        "{\n"
        "  /* @doc\n"
        "  Doubles a number.\n"
        "  Type:\n"
        "    int -> int\n"
        "  */\n"
        "  double = x: x * 2;\n"
        "}\n"
    )


@pytest.fixture
def make_tree():
    """Build a flat attribute-set arena by hand from [(name, leading), ...]."""

    def _make(bindings):
        tree = SyntaxTree()
        root = tree.add(NodeKind.NODE, "attrset_expression")
        tree.add(NodeKind.TOKEN, "{", text="{", parent=root.index)
        for name, leading in bindings:
            binding = tree.add(NodeKind.NODE, "binding", parent=root.index)
            tree.add(NodeKind.IDENT, "identifier", text=name, parent=binding.index, leading=tuple(leading))
            tree.add(NodeKind.TOKEN, "=", text="=", parent=binding.index, leading=(whitespace(" "),))
            tree.add(NodeKind.TOKEN, "integer_expression", text="1", parent=binding.index)
            tree.add(NodeKind.TOKEN, ";", text=";", parent=binding.index)
        tree.add(NodeKind.TOKEN, "}", text="}", parent=root.index)
        return tree

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() so loggers never outlive a captured stream."""
    yield
    structlog.reset_defaults()
    clear_context()
