"""Storage backend interface definitions.

Defines the StorageBackend abstract class the tree layer writes through:
a flat map of string keys to JSON-like records. Implementations decide
how (and whether) records are persisted.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional


class StorageBackend(ABC):
    """Abstract flat key/value backend."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the record stored under `key`, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous record."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key`. Deleting an absent key is not an error."""

    def keys(self) -> Iterable[str]:
        """Return the stored keys. Backends that cannot enumerate raise."""
        raise NotImplementedError(f"{type(self).__name__} cannot list keys")


class CallableBackend(StorageBackend):
    """Adapt three plain callables to the backend interface.

    Without a `deleter`, deleting a key stores None in its place, which
    readers cannot tell apart from an absent key.
    """

    def __init__(
        self,
        getter: Callable[[str], Any],
        setter: Callable[[str, Any], None],
        deleter: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._getter = getter
        self._setter = setter
        self._deleter = deleter

    def get(self, key: str) -> Any:
        return self._getter(key)

    def set(self, key: str, value: Any) -> None:
        self._setter(key, value)

    def delete(self, key: str) -> None:
        if self._deleter is None:
            self._setter(key, None)
        else:
            self._deleter(key)
