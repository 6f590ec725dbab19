"""Storage backend that keeps every record in a single document.

All keys live in one mapping which is serialized to a single file, the
way a userscript manager keeps a script's whole value store together.
The document is read on first access and rewritten atomically after
every change.
"""
from __future__ import annotations
import copy
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, Optional

from .base import StorageBackend
from .serializer import JSONSerializer, Serializer

logger = logging.getLogger(__name__)


class SingleFileStorage(StorageBackend):
    """Backend that targets a single on-disk file.

    Parameters
    - file_path: path to the document. The serializer's extension is
      appended when the path has no suffix of its own.
    - serializer: encodes the whole key -> record mapping.
    """

    def __init__(self, file_path: str | Path, serializer: Optional[Serializer] = None) -> None:
        self.serializer = serializer or JSONSerializer()
        self.file_path = self._with_extension(Path(file_path))
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()
        self._records: Optional[Dict[str, Any]] = None

    def _with_extension(self, path: Path) -> Path:
        if path.suffix:
            return path
        return path.with_name(path.name + self.serializer.extension)

    def _load(self) -> Dict[str, Any]:
        if self._records is None:
            if self.file_path.exists():
                data = self.file_path.read_bytes()
                logger.debug("SingleFileStorage loaded %s (%d bytes)", self.file_path, len(data))
                self._records = self.serializer.load(data) or {}
            else:
                self._records = {}
        return self._records

    def _flush(self) -> None:
        tmp = self.file_path.with_name(self.file_path.name + ".tmp")
        with open(tmp, "wb") as f:
            f.write(self.serializer.dump(self._records))
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(self.file_path)

    def get(self, key: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._load().get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._load()[key] = copy.deepcopy(value)
            self._flush()

    def delete(self, key: str) -> None:
        with self._lock:
            records = self._load()
            if key in records:
                del records[key]
                self._flush()

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._load().keys())

