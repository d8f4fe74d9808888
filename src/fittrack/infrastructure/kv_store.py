"""
Byte-level key/value persistence.

The ledger treats persistence as an opaque synchronous get/set store. Two
implementations are provided: one file per key in a local directory, and an
in-process dictionary.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from fittrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Synchronous byte store keyed by string."""

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None when the key is absent."""
        ...

    def set(self, key: str, data: bytes) -> bool:
        """Store bytes under key. Returns False when the write failed."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present. Raises StorageError when removal fails."""
        ...


class MemoryKeyValueStore:
    """Key/value store held in process memory."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, data: bytes) -> bool:
        self._data[key] = bytes(data)
        return True

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileKeyValueStore:
    """
    Key/value store backed by one file per key in a directory.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so a reader never sees a half-written value.
    """

    def __init__(self, directory: str | Path) -> None:
        """
        Initialize file store.

        Args:
            directory: Directory holding one "<key>.json" file per key.
                Created on first write.
        """
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            return None

    def set(self, key: str, data: bytes) -> bool:
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
            return True
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            raise StorageError(f"Failed to delete {path}: {e}") from e
