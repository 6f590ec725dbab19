"""Flat key/value backends the tree storage writes through."""
from __future__ import annotations
from pathlib import Path
from typing import Optional

from .base import StorageBackend, CallableBackend
from .interfaces import KeyValueProtocol
from .memory_backend import MemoryStorage
from .file_backend import FileStorageBackend
from .single_file_backend import SingleFileStorage
from .serializer import (
    Serializer,
    JSONSerializer,
    YAMLSerializer,
    PickleSerializer,
    EncryptedSerializer,
    get_serializer,
)

BACKENDS = ("memory", "file", "single_file")


def create_storage(
    backend: str = "memory",
    serializer: str = "json",
    data_dir: str | Path = "data",
    file_name: str = "storage",
    password: Optional[str] = None,
    key: Optional[str | bytes] = None,
) -> StorageBackend:
    """Compose a backend and its serializer by name.

    The serializer is ignored for the memory backend, which keeps Python
    objects as they are.
    """
    if backend == "memory":
        return MemoryStorage()
    if backend not in BACKENDS:
        raise ValueError(f"unknown storage backend: {backend!r}")
    ser = get_serializer(serializer, password=password, key=key)
    if backend == "file":
        return FileStorageBackend(data_dir=data_dir, serializer=ser)
    return SingleFileStorage(Path(data_dir) / file_name, serializer=ser)


__all__ = [
    "StorageBackend",
    "CallableBackend",
    "KeyValueProtocol",
    "MemoryStorage",
    "FileStorageBackend",
    "SingleFileStorage",
    "Serializer",
    "JSONSerializer",
    "YAMLSerializer",
    "PickleSerializer",
    "EncryptedSerializer",
    "get_serializer",
    "create_storage",
]
