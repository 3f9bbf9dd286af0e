"""File-backed key-value store: one JSON document per key."""

import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from installment_plan.exceptions import StorageError
from installment_plan.store.base import KeyValueStore


class JsonFileKeyValueStore(KeyValueStore):
    """Store each key as ``<directory>/<quoted key>.json``.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a half-written record.
    """

    def __init__(self, directory: str | Path) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        directory : str | Path
            Directory holding the files; created if missing.
        """
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create store directory {self.directory}: {e}") from e

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def remove(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Cannot remove {path}: {e}") from e
        return True
