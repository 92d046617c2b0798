"""
Local JSON File Storage Implementation

DESIGN DECISION: Each key is stored in its own `<key>.json` file
inside a data directory, because:
1. Users can open and read their data directly
2. No database setup required
3. Easy to back up or move

Writes go to a temporary file in the same directory first and are then
moved over the target with os.replace, so a crash mid-write leaves the
previous file intact.

TRADEOFFS:
- No transactions across keys (the snapshot repository orders its
  writes so that a partial save still loads as a valid ledger)
- Not suitable for concurrent writers (there is exactly one)
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from spendwise.services.storage.interface import (
    KeyValueStorageInterface,
    StorageConnectionError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileKeyValueStorage(KeyValueStorageInterface):
    """Stores each key as a UTF-8 JSON file under `data_dir`."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)
        self._logger = structlog.get_logger(__name__)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageConnectionError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageConnectionError(f"Failed to write {path}: {e}") from e

        self._logger.debug("storage_key_written", key=key, path=str(path))

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageConnectionError(f"Failed to delete {path}: {e}") from e
