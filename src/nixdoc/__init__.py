"""
nixdoc

Generates DocBook reference sections from documentation comments in Nix
library files.

Example:
    >>> from nixdoc import TreeWalker, build_entries
    >>> items = TreeWalker().walk_source("{ /* Doubles a number. */ double = x: x * 2; }")
    >>> [entry.ident for entry in build_entries(items, "math")]
    ['lib.math.double']
"""

__version__ = "0.1.0"

from nixdoc.config import NixdocConfig
from nixdoc.errors import (
    ConfigError,
    ErrorPhase,
    NixdocError,
    RenderError,
    SourceParseError,
    SourceReadError,
)
from nixdoc.models import ManualEntry, Parameter, build_entries
from nixdoc.orchestrator import DocumentationOrchestrator
from nixdoc.parser import DocComment, DocItem, TreeWalker, parse_doc_comment, parse_nix
from nixdoc.renderers import DocBookRenderer, DocBookWriter

__all__ = [
    "NixdocConfig",
    "ConfigError",
    "ErrorPhase",
    "NixdocError",
    "RenderError",
    "SourceParseError",
    "SourceReadError",
    "ManualEntry",
    "Parameter",
    "build_entries",
    "DocumentationOrchestrator",
    "DocComment",
    "DocItem",
    "TreeWalker",
    "parse_doc_comment",
    "parse_nix",
    "DocBookRenderer",
    "DocBookWriter",
    "__version__",
]
