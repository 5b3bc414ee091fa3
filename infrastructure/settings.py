"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)
        if not isinstance(self._data, dict):
            raise ValueError(f"settings root must be an object: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int; raise ValueError when present but not integral."""
        value = self.get(key, default)
        if isinstance(value, bool) or value is None:
            raise ValueError(f"setting {key} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as ex:
            raise ValueError(f"setting {key} must be an integer, got {value!r}") from ex

    def get_bool(self, key: str, default: bool) -> bool:
        """Return `key` as bool; raise ValueError for non-boolean values."""
        value = self.get(key, default)
        if not isinstance(value, bool):
            raise ValueError(f"setting {key} must be true/false, got {value!r}")
        return value

    def resolve_path(self, key: str) -> Path | None:
        """Return `key` as a path relative to the settings file, None if unset."""
        value = self.get(key)
        if not value:
            return None
        p = Path(str(value)).expanduser()
        return p if p.is_absolute() else (self._path.parent / p)
