"""
realty_frontend/storage.py
Durable client-side key/value storage for the session mirror.

Browser storage semantics: string keys, string values, get/set/remove.
JsonFileStorage persists to disk so a session survives process restarts;
MemoryStorage is the throwaway variant used by tests and embedded callers.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterator, Optional

# Fixed key names for the session mirror (always written/cleared together)
USER_KEY = "user"
USER_ID_KEY = "userId"
USER_TYPE_KEY = "userType"
SESSION_KEYS = (USER_KEY, USER_ID_KEY, USER_TYPE_KEY)


class ClientStorage:
    """Minimal storage interface (getItem/setItem/removeItem)."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> Iterator[str]:
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return self.get_item(key) is not None

    def write_many(self, items: Dict[str, str]) -> None:
        for key, value in items.items():
            self.set_item(key, value)

    def remove_many(self, keys) -> None:
        for key in keys:
            self.remove_item(key)


class MemoryStorage(ClientStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"storage values must be strings, got {type(value).__name__}")
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileStorage(ClientStorage):
    """
    Storage backed by a single JSON object on disk.

    Every mutation rewrites the file atomically (temp file + os.replace), and
    write_many/remove_many touch the file once so the session keys never end
    up half-written.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            # Corrupted file: treat as empty, next write replaces it
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self.write_many({key: value})

    def remove_item(self, key: str) -> None:
        self.remove_many([key])

    def keys(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._load()))

    def write_many(self, items: Dict[str, str]) -> None:
        for key, value in items.items():
            if not isinstance(value, str):
                raise TypeError(f"storage value for {key!r} must be a string")
        with self._lock:
            data = self._load()
            data.update(items)
            self._save(data)

    def remove_many(self, keys) -> None:
        with self._lock:
            data = self._load()
            changed = False
            for key in keys:
                if key in data:
                    del data[key]
                    changed = True
            if changed:
                self._save(data)
