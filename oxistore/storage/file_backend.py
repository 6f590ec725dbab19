"""File-backed storage backend: one file per record.

Each record is serialized into `<data_dir>/<encoded key><extension>`.
Keys are percent-encoded so any path maps to a single flat file name.
Keys whose encoded name would not fit in a file name are stored under a
sha256 digest instead, with the original key kept in a `.key` file next
to the record. Writes are atomic: the payload goes to a temporary file
which then replaces the target.
"""
from __future__ import annotations
import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional
from urllib.parse import quote, unquote

from .base import StorageBackend
from .serializer import JSONSerializer, Serializer

logger = logging.getLogger(__name__)

# leaves room for the extension and ".tmp" under the usual 255 byte limit
MAX_NAME_LENGTH = 200
HASHED_PREFIX = "#sha256-"
KEY_SUFFIX = ".key"


def encode_key(key: str) -> str:
    name = quote(key, safe="")
    # keep record files visible; a leading "." would hide them
    if name.startswith("."):
        name = "%2E" + name[1:]
    if len(name) > MAX_NAME_LENGTH:
        return HASHED_PREFIX + hashlib.sha256(key.encode("utf-8")).hexdigest()
    return name


def decode_key(name: str) -> str:
    return unquote(name)


def _write_atomic(path: Path, data: bytes) -> None:
    tmp = path.with_name(path.name + ".tmp")
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    tmp.replace(path)


class FileStorageBackend(StorageBackend):
    def __init__(self, data_dir: str | Path = "./data", serializer: Optional[Serializer] = None) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.serializer = serializer or JSONSerializer()

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{encode_key(key)}{self.serializer.extension}"

    def _key_file(self, name: str) -> Path:
        return self.data_dir / f"{name}{KEY_SUFFIX}"

    def get(self, key: str) -> Any:
        path = self._path_for(key)
        if not path.exists():
            return None
        logger.debug("FileStorageBackend read %s", path)
        return self.serializer.load(path.read_bytes())

    def set(self, key: str, value: Any) -> None:
        name = encode_key(key)
        if name.startswith(HASHED_PREFIX):
            # written first so keys() never meets a record it cannot name
            _write_atomic(self._key_file(name), key.encode("utf-8"))
        _write_atomic(self._path_for(key), self.serializer.dump(value))

    def delete(self, key: str) -> None:
        name = encode_key(key)
        self._path_for(key).unlink(missing_ok=True)
        if name.startswith(HASHED_PREFIX):
            self._key_file(name).unlink(missing_ok=True)

    def keys(self) -> Iterable[str]:
        ext = self.serializer.extension
        for p in sorted(self.data_dir.iterdir()):
            if not (p.is_file() and p.name.endswith(ext)):
                continue
            name = p.name[: -len(ext)]
            if name.startswith(HASHED_PREFIX):
                yield self._key_file(name).read_text(encoding="utf-8")
            else:
                yield decode_key(name)
