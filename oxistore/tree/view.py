"""Lazy handles over stored containers."""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Union

from oxistore.errors import DeserializationError, SerializationError
from .classify import is_primitive
from .descriptor import child_keys, is_descriptor
from .paths import join_path

if TYPE_CHECKING:
    from .codec import TreeCodec

logger = logging.getLogger(__name__)

Key = Union[str, int]


class LazyView:
    """A subscriptable handle bound to one container path.

    Reads and writes are forwarded to the codec one record at a time, so
    ``view["a"]["b"]`` never loads more than the records on that route.
    Once deactivated the view is inert: reads give None and writes are
    rejected, since callers may still hold a reference to it.
    """

    def __init__(self, codec: "TreeCodec", path: str, type_: str):
        self._codec = codec
        self._path = path
        self._type = type_
        self._active = True

    @property
    def path(self) -> str:
        return self._path

    @property
    def type(self) -> str:
        return self._type

    @property
    def active(self) -> bool:
        return self._active

    def deactivate(self) -> None:
        self._active = False

    def descriptor(self) -> Optional[Dict[str, Any]]:
        """Return the raw descriptor record backing this view."""
        if not self._active:
            return None
        record = self._codec.backend.get(self._path)
        return record if is_descriptor(record) else None

    def _child(self, key: Any) -> str:
        if isinstance(key, bool) or not isinstance(key, (str, int)):
            raise DeserializationError(
                "unexpected non-primitive key",
                {"path": self._path, "type": type(key).__name__, "key": key},
            )
        return join_path(self._path, key)

    def get(self, key: Key) -> Any:
        if not self._active:
            return None
        return self._codec.get(self._child(key))

    def set(self, key: Key, value: Any) -> bool:
        """Assign a primitive to `key`; return False if the view is inactive."""
        if not self._active:
            return False
        if not is_primitive(value):
            raise SerializationError(
                "only primitive values can be assigned through a view",
                {"path": self._path, "key": key, "type": type(value).__name__},
            )
        self._codec.set(self._child(key), value)
        return True

    def __getitem__(self, key: Key) -> Any:
        return self.get(key)

    def __setitem__(self, key: Key, value: Any) -> None:
        """Subscript form of `set`. Writes to an inactive view are logged and dropped."""
        if not self.set(key, value):
            logger.warning("Ignored write to %r through inactive view %s", key, self._path)

    def keys(self) -> List[str]:
        record = self.descriptor()
        return child_keys(record) if record else []

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: object) -> bool:
        return str(key) in self.keys()

    def to_python(self) -> Any:
        """Materialize the whole subtree as plain dicts and lists."""
        if not self._active:
            return None
        return self._codec.materialize(self._path)

    def __repr__(self) -> str:
        state = "active" if self._active else "inactive"
        return f"LazyView(path={self._path!r}, type={self._type!r}, {state})"
