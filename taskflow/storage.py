"""
TASKFLOW - Storage Adapter
==========================
Key-value string persistence. The only gateway to durable state.

Values are opaque strings; callers own JSON encoding. ``load_json`` is the
one place that decodes, and it never lets a parse failure escape.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

STORAGE_FILENAME = "storage.json"


class TaskFlowError(Exception):
    """Base error for taskflow"""


class StorageError(TaskFlowError):
    """Persisting a value failed"""


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value

    def clear(self) -> None:
        self.data = {}


class FileStorage:
    """
    File-backed storage

    All keys live in a single JSON document: {data_dir}/storage.json
    Every save rewrites the whole document through a temp file + os.replace,
    so readers only ever see the old or the new value of a key.
    """

    def __init__(self, data_dir: str = ".taskflow"):
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / STORAGE_FILENAME

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.path}: expected an object")
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=".storage-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def load(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def save(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        logger.debug(f"Saved key {key!r} ({len(value)} chars)")

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {self.path}: {e}") from e
        logger.info(f"Cleared storage at {self.path}")


def load_json(storage: Any, key: str, default: Any = None) -> Any:
    """Decode the JSON stored under key, or return default if absent/malformed"""
    raw = storage.load(key)
    if raw is None:
        return default

    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning(f"Malformed JSON under {key!r}, using default: {e}")
        return default


def save_json(storage: Any, key: str, value: Any) -> None:
    storage.save(key, json.dumps(value, ensure_ascii=False))
