"""Recursive encoding of nested values onto a flat key/value backend.

`TreeCodec.set` turns a nested value into one backend record per node:
containers become descriptors and primitives are stored as leaves. `get`
reads one record back and hands out a lazy view for containers. `delete`
tears a whole subtree down.

Every set/delete finishes by rewriting the parent's descriptor, so the
parent manifest only ever names children that were fully written.
"""
from __future__ import annotations
import logging
import re
from typing import Any, Callable, Dict, Optional, Set

from oxistore.errors import DeserializationError, SerializationError
from oxistore.storage.interfaces import KeyValueProtocol
from .classify import ValueKind, classify
from .descriptor import (
    ARRAY,
    OBJECT,
    ManifestMode,
    ParentLocation,
    apply_manifest_delta,
    child_keys,
    is_descriptor,
    locate_parent,
    new_descriptor,
)
from .paths import ROOT, SEPARATOR, PathLike, join_path, resolve_path

logger = logging.getLogger(__name__)

ViewFactory = Callable[[str, str], Any]

_INDEX = re.compile(r"^(0|[1-9][0-9]*)$")


class TreeCodec:
    """Read and write nested values through a flat backend.

    `view_factory(path, type)` builds the handle returned by `get` for
    container paths.
    """

    def __init__(self, backend: KeyValueProtocol, view_factory: ViewFactory):
        self.backend = backend
        self._view_factory = view_factory

    # Reads

    def get(self, path: PathLike) -> Any:
        resolved = resolve_path(path)
        if resolved != ROOT:
            locate_parent(self.backend, resolved)
        record = self.backend.get(resolved)
        if is_descriptor(record):
            return self._view_factory(resolved, record["type"])
        return record

    def materialize(self, path: PathLike) -> Any:
        """Read the subtree at `path` into plain dicts, lists and primitives."""
        resolved = resolve_path(path)
        if resolved != ROOT:
            locate_parent(self.backend, resolved)
        return self._read_tree(resolved)

    def _read_tree(self, path: str) -> Any:
        record = self.backend.get(path)
        if not is_descriptor(record):
            return record
        if record["type"] == OBJECT:
            return {k: self._read_tree(join_path(path, k)) for k in record["keys"]}
        return [self._read_tree(join_path(path, i)) for i in range(record["length"])]

    # Writes

    def set(self, path: PathLike, value: Any) -> None:
        resolved = resolve_path(path)
        kind = self._validate(resolved, value)
        location = locate_parent(self.backend, resolved)
        self._check_array_slot(location, ManifestMode.INSERT)

        self._teardown(resolved)
        self._write(resolved, kind, value)
        self._update_manifest(ManifestMode.INSERT, location.parent_path, location.child_key)

    def _validate(self, path: str, value: Any, route: Optional[Set[int]] = None) -> ValueKind:
        """Check the whole value tree before anything is written.

        `route` holds the ids of the containers enclosing `value`; meeting
        one of them again means the value refers to itself.
        """
        kind = classify(value)
        if kind is ValueKind.UNSUPPORTED:
            raise SerializationError(
                "unsupported value type",
                {"path": path, "type": type(value).__name__, "value": value},
            )
        if kind in (ValueKind.OBJECT, ValueKind.ARRAY):
            route = set() if route is None else route
            if id(value) in route:
                raise SerializationError("value contains itself", {"path": path})
            route.add(id(value))
        if kind is ValueKind.OBJECT:
            for key, item in value.items():
                if not isinstance(key, str) or key == "" or SEPARATOR in key:
                    raise SerializationError(
                        "object key is not a valid path segment",
                        {"path": path, "key": key},
                    )
                self._validate(join_path(path, key), item, route)
        elif kind is ValueKind.ARRAY:
            for index, item in enumerate(value):
                self._validate(join_path(path, index), item, route)
        if kind in (ValueKind.OBJECT, ValueKind.ARRAY):
            route.discard(id(value))
        return kind

    def _write(self, path: str, kind: ValueKind, value: Any) -> None:
        if kind is ValueKind.PRIMITIVE:
            logger.debug("set leaf %s", path)
            self.backend.set(path, value)
            return

        container = OBJECT if kind is ValueKind.OBJECT else ARRAY
        descriptor = new_descriptor(container)
        self.backend.set(path, descriptor)
        items = value.items() if container == OBJECT else enumerate(value)
        for key, item in items:
            self._write(join_path(path, key), classify(item), item)
            self._update_manifest(ManifestMode.INSERT, path, str(key))
        logger.debug("set %s container %s (%d children)", container, path, len(value))

    def delete(self, path: PathLike) -> None:
        resolved = resolve_path(path)
        location = locate_parent(self.backend, resolved)
        self._check_array_slot(location, ManifestMode.REMOVE)

        self._teardown(resolved)
        if location.parent["type"] == ARRAY:
            self._close_gap(location)
        self._update_manifest(ManifestMode.REMOVE, location.parent_path, location.child_key)

    def _teardown(self, path: str) -> None:
        """Delete `path` and every descendant without touching its parent."""
        record = self.backend.get(path)
        if is_descriptor(record):
            for key in child_keys(record):
                self._teardown(join_path(path, key))
        logger.debug("delete %s", path)
        self.backend.delete(path)

    def _close_gap(self, location: ParentLocation) -> None:
        # shift later elements down one index so the array stays contiguous
        length = location.parent["length"]
        for index in range(int(location.child_key) + 1, length):
            source = join_path(location.parent_path, index)
            target = join_path(location.parent_path, index - 1)
            self._move(source, target)

    def _move(self, source: str, target: str) -> None:
        value = self._read_tree(source)
        self._teardown(source)
        self._write(target, classify(value), value)

    # Manifest bookkeeping

    def _check_array_slot(self, location: ParentLocation, mode: ManifestMode) -> None:
        if location.parent["type"] != ARRAY:
            return
        length = location.parent["length"]
        key = location.child_key
        upper = length + 1 if mode is ManifestMode.INSERT else length
        if not _INDEX.match(key) or int(key) >= upper:
            raise DeserializationError(
                "array index out of range",
                {"path": location.path, "index": key, "length": length},
            )

    def _update_manifest(self, mode: ManifestMode, parent_path: str, child_key: str) -> None:
        parent: Dict[str, Any] = self.backend.get(parent_path)
        self.backend.set(parent_path, apply_manifest_delta(mode, parent, child_key))
