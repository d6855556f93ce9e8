"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_SUFFIXES = (".yaml", ".yml")


class ConfigManager:
    """YAML-backed configuration loader."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def path_for(self, name: str) -> Path:
        for suffix in _SUFFIXES:
            candidate = self._base_path / f"{name}{suffix}"
            if candidate.exists():
                return candidate
        return self._base_path / f"{name}{_SUFFIXES[0]}"

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        return self.load_file(self.path_for(name))

    @staticmethod
    def load_file(path: str | Path) -> dict[str, Any]:
        """Load a YAML mapping from an explicit path."""
        with Path(path).open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}


__all__ = ["ConfigManager"]
