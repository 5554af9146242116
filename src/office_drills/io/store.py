"""
Key-value persistence port.

Every stored resource (catalog, cooldown ids, sessions, settings) is a
single JSON value read and written as a whole. JsonDirectoryStore keeps one
``<key>.json`` file per key and replaces it atomically; MemoryStore keeps
values in a dict for tests.
"""

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from .serializers import ValidationError


class KeyValueStore(Protocol):
    """Whole-value get/set over JSON-compatible values."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """In-memory store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonDirectoryStore:
    """
    Stores each key as ``<base_dir>/<key>.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so readers never see a half-written value.
    """

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.base_dir / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """
        Load the value for ``key``.

        Returns:
            Parsed JSON value, or ``default`` if the file does not exist

        Raises:
            ValidationError: If the file exists but is not valid JSON
        """
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.base_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
