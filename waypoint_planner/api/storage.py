# waypoint_planner/api/storage.py
"""Local key-value storage backends.

Both backends expose the same three-call surface (``get`` / ``set`` /
``remove``) and hold string values only; serialisation is the caller's job.
"""

import json
import logging
import os
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-process storage, lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStorage:
    """Storage backed by a single JSON object on local disk.

    The file maps keys to string values. Writes go to a temporary file which
    then replaces the original, so a crash mid-write leaves the previous
    contents intact.
    """

    def __init__(self, path: str):
        self.path = path
        self.lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} does not hold an object, ignoring it")
            return {}
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self.lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)
        logger.debug(f"Stored {len(value)} bytes under '{key}'")

    def remove(self, key: str) -> None:
        with self.lock:
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)
                logger.debug(f"Removed storage key '{key}'")

    def __contains__(self, key: str) -> bool:
        with self.lock:
            return key in self._read_all()


__all__ = ["MemoryStorage", "JsonFileStorage"]
