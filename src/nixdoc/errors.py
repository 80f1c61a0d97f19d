"""
Structured error types for nixdoc.

Every failure in a nixdoc run is fatal. The error hierarchy exists so the
command line can say *which phase* failed (reading the file, parsing it,
rendering the document) and what the underlying cause was.

Manifesto:
    - **Typed by phase:** READ, PARSE, RENDER and CONFIG errors are distinct
    - **Never retried:** Parsing and rendering are deterministic
    - **Chained causes:** The original OSError / parser failure is preserved

Architecture:
    ::

        NixdocError (phase, cause, context)
            │
            ├── SourceReadError    (READ)
            ├── SourceParseError   (PARSE, line, column)
            ├── RenderError        (RENDER)
            └── ConfigError        (CONFIG)

Examples:
    >>> error = SourceParseError("unexpected token", line=3, column=7)
    >>> error.phase
    <ErrorPhase.PARSE: 'parse'>
    >>> error.to_dict()["line"]
    3

Tags:
    error-handling, exception-hierarchy, nixdoc
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorPhase(str, Enum):
    """Pipeline phase an error was raised in."""

    READ = "read"
    PARSE = "parse"
    RENDER = "render"
    CONFIG = "config"


class NixdocError(Exception):
    """
    Base exception for all nixdoc errors.

    Subclasses set ``default_phase``; callers may still override it. The
    ``context`` dict carries free-form metadata (file path, category, element
    name) that ends up in logs via ``to_dict()``.
    """

    default_phase: ErrorPhase = ErrorPhase.RENDER

    def __init__(
        self,
        message: str,
        *,
        phase: ErrorPhase | None = None,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.phase = phase or self.default_phase
        self.cause = cause
        self.context = dict(context or {})

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> NixdocError:
        """Add context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "phase": self.phase.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, phase={self.phase.value})"


class SourceReadError(NixdocError):
    """The Nix source file could not be read or decoded."""

    default_phase = ErrorPhase.READ


class SourceParseError(NixdocError):
    """
    The Nix source did not parse.

    ``line`` and ``column`` are 1-based and point at the first error node the
    parser reported, when one is known.
    """

    default_phase = ErrorPhase.PARSE

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.line = line
        self.column = column

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.line is not None:
            result["line"] = self.line
            result["column"] = self.column
        return result


class RenderError(NixdocError):
    """Writing to the document sink failed."""

    default_phase = ErrorPhase.RENDER


class ConfigError(NixdocError):
    """Missing or invalid configuration."""

    default_phase = ErrorPhase.CONFIG


__all__ = [
    "ErrorPhase",
    "NixdocError",
    "SourceReadError",
    "SourceParseError",
    "RenderError",
    "ConfigError",
]
