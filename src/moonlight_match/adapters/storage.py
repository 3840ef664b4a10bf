"""Persistent key-value storage for session data."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class StorageError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


class KeyValueStorage(Protocol):
    """Interface for string key-value persistence."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class JsonFileStorage(KeyValueStorage):
    """Key-value store kept in a single JSON file."""

    path: Path

    @classmethod
    def create(cls, path: str) -> "JsonFileStorage":
        """Create a store at ``path``, expanding ``~``."""
        return cls(path=Path(path).expanduser())

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to read {self.path}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected storage layout in {self.path}")
        return data

    def _write(self, data: dict[str, object]) -> None:
        # Replace the whole file so a crash never leaves half a document.
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self.path}") from exc
