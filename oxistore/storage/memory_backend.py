"""Simple memory-backed storage backend

This backend keeps every record in a dict keyed by the record path.
Records are copied on the way in and out so callers cannot mutate stored
state behind the backend's back.
"""
import copy
from threading import RLock
from typing import Dict, Any, Optional, Iterable

from .base import StorageBackend


class MemoryStorage(StorageBackend):
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._lock = RLock()
        self._store: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._store.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._store.keys())

    def snapshot(self) -> Dict[str, Any]:
        """Return a deep copy of every stored record."""
        with self._lock:
            return copy.deepcopy(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
