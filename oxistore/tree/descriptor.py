"""Container descriptors and manifest bookkeeping.

A container path stores a descriptor record instead of leaf data:

    {"type": "object", "keys": ["a", "b"]}
    {"type": "array", "length": 2}

The descriptor's manifest (`keys` or `length`) names exactly the child
records present one segment below the container. The helpers here read
descriptors and compute revised ones; writing them back is left to the
codec so that the manifest update is always the last backend write.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from oxistore.errors import DeserializationError
from oxistore.storage.interfaces import KeyValueProtocol
from .paths import ROOT, PathLike, parse_path, resolve_path

OBJECT = "object"
ARRAY = "array"
CONTAINER_TYPES = (OBJECT, ARRAY)


class ManifestMode(Enum):
    INSERT = "insert"
    REMOVE = "remove"


@dataclass(frozen=True)
class ParentLocation:
    """Where a path hangs in the tree."""

    path: str
    parent_path: str
    parent: Dict[str, Any]
    child_key: str


def is_descriptor(record: Any) -> bool:
    return isinstance(record, dict) and record.get("type") in CONTAINER_TYPES


def new_descriptor(type_: str) -> Dict[str, Any]:
    if type_ == OBJECT:
        return {"type": OBJECT, "keys": []}
    if type_ == ARRAY:
        return {"type": ARRAY, "length": 0}
    raise ValueError(f"unknown container type: {type_!r}")


def root_descriptor() -> Dict[str, Any]:
    return {"root": True, "type": OBJECT, "keys": []}


def read_descriptor(backend: KeyValueProtocol, path: PathLike) -> Optional[Dict[str, Any]]:
    record = backend.get(resolve_path(path))
    return record if is_descriptor(record) else None


def child_keys(descriptor: Dict[str, Any]) -> List[str]:
    """Return the manifest of `descriptor` as a list of child segments."""
    if descriptor["type"] == OBJECT:
        return list(descriptor.get("keys", []))
    return [str(i) for i in range(descriptor.get("length", 0))]


def locate_parent(backend: KeyValueProtocol, path: PathLike) -> ParentLocation:
    """Find the container descriptor that owns `path`.

    Raises DeserializationError when `path` is the root, when its last
    segment is empty, or when no container descriptor exists above it.
    """
    resolved = resolve_path(path)
    if resolved == ROOT:
        raise DeserializationError("the root has no parent container", {"path": resolved})
    segments = parse_path(resolved)
    child_key = segments[-1]
    if child_key == "":
        raise DeserializationError("empty path segment", {"path": resolved})
    parent_path = resolve_path(segments[:-1])
    parent = read_descriptor(backend, parent_path)
    if parent is None:
        raise DeserializationError(
            "parent container does not exist",
            {"path": resolved, "parent_path": parent_path, "parent": backend.get(parent_path)},
        )
    return ParentLocation(resolved, parent_path, parent, child_key)


def apply_manifest_delta(mode: ManifestMode, descriptor: Dict[str, Any], child_key: str) -> Dict[str, Any]:
    """Return a copy of `descriptor` with `child_key` inserted or removed."""
    if not isinstance(mode, ManifestMode):
        raise ValueError(f"invalid manifest mode: {mode!r}")
    if not is_descriptor(descriptor):
        raise DeserializationError("value is not a container descriptor", {"descriptor": descriptor})

    updated = dict(descriptor)
    if descriptor["type"] == OBJECT:
        keys = list(descriptor.get("keys", []))
        if mode is ManifestMode.INSERT:
            if child_key not in keys:
                keys.append(child_key)
        else:
            keys = [k for k in keys if k != child_key]
        updated["keys"] = keys
    else:
        length = descriptor.get("length", 0)
        if mode is ManifestMode.INSERT:
            # overwriting an existing index does not grow the array
            if int(child_key) >= length:
                length += 1
        else:
            length = max(length - 1, 0)
        updated["length"] = length
    return updated
