"""
Configuration for nixdoc.

A run needs a source file, a category and a category description. These can
come from the command line, a YAML file, or both (command line wins).

Example YAML::

    file: lib/strings.nix
    category: strings
    description: String manipulation functions
    indent: 2
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from nixdoc.errors import ConfigError

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class NixdocConfig:
    """Configuration for a single nixdoc run.

    Attributes:
        file: Nix file to process
        category: Name of the function category (e.g. 'strings', 'attrsets')
        description: Description of the function category
        indent: Spaces per nesting level in the output (0 disables indentation)
        write_declaration: Emit the XML declaration
        log_level: Log level for stderr logging
        json_logs: Force JSON (True) or console (False) logs; None auto-detects
    """

    file: Path | None = None
    category: str | None = None
    description: str | None = None
    indent: int = 2
    write_declaration: bool = True
    log_level: str = "WARNING"
    json_logs: bool | None = None

    def __post_init__(self):
        """Convert paths to Path objects if strings."""
        if isinstance(self.file, str):
            self.file = Path(self.file)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> NixdocConfig:
        """Load configuration from YAML file.

        Raises:
            ConfigError: If the file cannot be read or is not a mapping
        """
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot load config {yaml_path}: {e}", cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"config {yaml_path} must be a mapping, got {type(data).__name__}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NixdocConfig:
        """Create config from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": str(self.file) if self.file else None,
            "category": self.category,
            "description": self.description,
            "indent": self.indent,
            "write_declaration": self.write_declaration,
            "log_level": self.log_level,
            "json_logs": self.json_logs,
        }

    def merge(self, **overrides: Any) -> NixdocConfig:
        """Return a copy with every non-None override applied."""
        data = self.to_dict()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return NixdocConfig.from_dict(data)

    def validate(self) -> None:
        """Check that the run has everything it needs.

        Raises:
            ConfigError: If file, category or description is missing, or a
                setting has the wrong type or value
        """
        missing = [name for name in ("file", "category", "description") if getattr(self, name) is None]
        if missing:
            raise ConfigError(f"missing required setting(s): {', '.join(missing)}")

        if not isinstance(self.file, Path):
            raise ConfigError(f"file must be a path, got {self.file!r}")
        for name in ("category", "description"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} must be a string, got {getattr(self, name)!r}")

        # bool is a subclass of int
        if isinstance(self.indent, bool) or not isinstance(self.indent, int):
            raise ConfigError(f"indent must be an integer, got {self.indent!r}")
        if self.indent < 0:
            raise ConfigError(f"indent must be >= 0, got {self.indent}")

        if not isinstance(self.write_declaration, bool):
            raise ConfigError(f"write_declaration must be true or false, got {self.write_declaration!r}")
        if self.json_logs is not None and not isinstance(self.json_logs, bool):
            raise ConfigError(f"json_logs must be true, false or null, got {self.json_logs!r}")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

    @property
    def indent_string(self) -> str:
        return " " * self.indent


__all__ = ["LOG_LEVELS", "NixdocConfig"]
