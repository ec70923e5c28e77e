"""Durable key-value storage for user preferences."""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

from movieapp.utils.logger import setup_logger


class PreferenceStore(Protocol):
    """Named durable values (get/set by name)."""

    def get(self, name: str) -> Any | None: ...

    def set(self, name: str, value: Any) -> None: ...


class JSONPreferenceStore:
    """Preference values persisted in a single JSON document.

    Every ``set`` rewrites the whole document through a temporary file and
    an atomic rename, so a value is durable once the call returns.
    """

    def __init__(self, path: Path) -> None:
        """Initialize preference store.

        Args:
            path: JSON file holding all values.
        """
        self._path = path
        self._lock = threading.Lock()
        self._logger = setup_logger("movieapp.favorites.storage")

    @property
    def path(self) -> Path:
        """Return storage file path."""
        return self._path

    def get(self, name: str) -> Any | None:
        """Read a value.

        Args:
            name: Value identifier.

        Returns:
            Stored value or None if absent.
        """
        with self._lock:
            return self._read_document().get(name)

    def set(self, name: str, value: Any) -> None:
        """Persist a value, replacing any previous one.

        Args:
            name: Value identifier.
            value: JSON-serializable value.
        """
        with self._lock:
            document = self._read_document()
            document[name] = value
            self._write_document(document)
        self._logger.debug(f"Preference saved: {name}")

    def delete(self, name: str) -> bool:
        """Delete a value.

        Args:
            name: Value identifier.

        Returns:
            True if deleted, False if not found.
        """
        with self._lock:
            document = self._read_document()
            if name not in document:
                return False
            del document[name]
            self._write_document(document)
        self._logger.debug(f"Preference deleted: {name}")
        return True

    def exists(self, name: str) -> bool:
        """Check if a value is stored."""
        with self._lock:
            return name in self._read_document()

    def _read_document(self) -> dict[str, Any]:
        """Load the whole document; missing or unreadable files read as empty."""
        if not self._path.exists():
            return {}

        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.warning(f"Unreadable preferences file {self._path.name}: {e}")
            return {}

        if not isinstance(data, dict):
            self._logger.warning(f"Ignoring malformed preferences file {self._path.name}")
            return {}
        return data

    def _write_document(self, document: dict[str, Any]) -> None:
        """Write the document atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
