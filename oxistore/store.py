"""OxiStorage: nested values over a flat key/value backend.

Usage:

    from oxistore import OxiStorage
    from oxistore.storage import MemoryStorage

    store = OxiStorage(MemoryStorage())
    store.set("settings", {"theme": "dark", "recent": ["a", "b"]})
    store.get("settings.theme")          # "dark"
    view = store.get("settings.recent")  # LazyView over ".settings.recent"
    view[0]                              # "a"
    store.delete("settings")             # removes every record below it
"""
from __future__ import annotations
import logging
import time
from typing import Any, Dict, List, Optional

from oxistore.errors import DeserializationError
from oxistore.storage import CallableBackend, KeyValueProtocol, create_storage
from oxistore.tree import LazyView, TreeCodec, is_descriptor, locate_parent, resolve_path
from oxistore.tree.descriptor import root_descriptor
from oxistore.tree.paths import ROOT, PathLike

logger = logging.getLogger(__name__)

METADATA_KEY = "oxi_storage_metadata"
STORAGE_VERSION = [1, 0, 0]


class OxiStorage:
    """Read and write nested values addressed by dotted paths.

    The backend must be passed in explicitly; anything with `get` and `set`
    methods works (see `oxistore.storage.CallableBackend` to adapt plain
    functions). Without a `delete` method, deleting a record stores None
    in its place. Opening a storage writes the metadata record
    and the root container descriptor if the backend lacks them.
    """

    def __init__(self, backend: KeyValueProtocol):
        if not (callable(getattr(backend, "get", None)) and callable(getattr(backend, "set", None))):
            raise TypeError(f"backend must provide get/set, got {type(backend).__name__}")
        if not callable(getattr(backend, "delete", None)):
            logger.info("%s has no delete; deleted records will be stored as None", type(backend).__name__)
            backend = CallableBackend(backend.get, backend.set)
        self.backend = backend
        self._codec = TreeCodec(backend, self._create_view)
        self._active_views: List[LazyView] = []
        self._bootstrap()

    def _bootstrap(self) -> None:
        if self.backend.get(METADATA_KEY) is None:
            logger.info("Initialising storage metadata")
            self.backend.set(METADATA_KEY, {
                "version": list(STORAGE_VERSION),
                "creation_date": int(time.time() * 1000),
            })
        if self.backend.get(ROOT) is None:
            logger.info("Creating root container")
            self.backend.set(ROOT, root_descriptor())

    @property
    def metadata(self) -> Optional[Dict[str, Any]]:
        return self.backend.get(METADATA_KEY)

    # Values

    def get(self, path: PathLike) -> Any:
        """Return the primitive at `path`, or a LazyView for containers.

        Paths whose parent container is missing raise DeserializationError;
        a missing leaf under an existing container reads as None.
        """
        return self._codec.get(path)

    def set(self, path: PathLike, value: Any) -> None:
        """Store `value` at `path`, replacing whatever was there."""
        self._codec.set(path, value)

    def delete(self, path: PathLike) -> None:
        """Delete `path` and everything below it."""
        self._codec.delete(path)

    def materialize(self, path: PathLike = ROOT) -> Any:
        """Return the subtree at `path` as plain dicts, lists and primitives."""
        return self._codec.materialize(path)

    def record(self, path: PathLike) -> Any:
        """Return the raw backend record at `path`; containers give their descriptor."""
        resolved = resolve_path(path)
        if resolved != ROOT:
            locate_parent(self.backend, resolved)
        return self.backend.get(resolved)

    def exists(self, path: PathLike) -> bool:
        resolved = resolve_path(path)
        if resolved == ROOT:
            return True
        try:
            locate_parent(self.backend, resolved)
        except DeserializationError:
            return False
        return self.backend.get(resolved) is not None

    def __getitem__(self, path: PathLike) -> Any:
        return self.get(path)

    def __setitem__(self, path: PathLike, value: Any) -> None:
        self.set(path, value)

    def __delitem__(self, path: PathLike) -> None:
        self.delete(path)

    def __contains__(self, path: PathLike) -> bool:
        return self.exists(path)

    # Views

    def root_view(self) -> LazyView:
        """Create and register a new view over the root container."""
        return self.create_view(ROOT)

    @property
    def active_views(self) -> List[LazyView]:
        return list(self._active_views)

    def create_view(self, path: PathLike) -> LazyView:
        """Return a new LazyView over the container stored at `path`."""
        resolved = resolve_path(path)
        record = self.backend.get(resolved)
        if not is_descriptor(record):
            raise DeserializationError("path is not a container", {"path": resolved, "value": record})
        return self._create_view(resolved, record["type"])

    def _create_view(self, path: str, type_: str) -> LazyView:
        view = LazyView(self._codec, path, type_)
        self._active_views.append(view)
        return view

    def remove_view(self, view: LazyView) -> None:
        """Deactivate `view` and forget it. Stored data is left untouched."""
        view.deactivate()
        self._active_views = [v for v in self._active_views if v is not view]

    def remove_all_views(self) -> None:
        for view in self._active_views:
            view.deactivate()
        self._active_views = []


def open_storage(config) -> OxiStorage:
    """Build the backend described by a StoreConfig and open it."""
    backend = create_storage(
        backend=config.backend,
        serializer=config.serializer,
        data_dir=config.data_dir,
        file_name=config.file_name,
        password=config.password,
        key=config.key,
    )
    return OxiStorage(backend)
