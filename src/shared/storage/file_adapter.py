"""JSON-file key-value storage shared between processes.

The whole mapping lives in one JSON document. Every read goes back to disk so
writes from other processes become visible, and every write replaces the file
atomically. Concurrent writers are last-write-wins, exactly like two browser
tabs sharing local storage.
"""

import json
import os
import tempfile
from pathlib import Path

import structlog

from shared.storage.port import KeyValueStorage, StorageError

logger = structlog.get_logger(__name__)


class FileStorage(KeyValueStorage):
    """Key-value storage persisted to a single JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Storage file is not valid JSON, treating as empty", path=str(self.path))
            return {}

        if not isinstance(data, dict):
            logger.warning("Storage file does not hold an object, treating as empty", path=str(self.path))
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())
