"""OxiStore: nested values stored through a flat key/value backend."""

__version__ = "1.0.0"

from .errors import OxiStorageError, SerializationError, DeserializationError
from .store import OxiStorage, open_storage
from .tree import LazyView

__all__ = [
    "__version__",
    "OxiStorageError",
    "SerializationError",
    "DeserializationError",
    "OxiStorage",
    "open_storage",
    "LazyView",
]
