"""Hierarchical values on top of a flat key/value backend."""

from .classify import ValueKind, classify, is_primitive
from .codec import TreeCodec
from .descriptor import (
    ManifestMode,
    ParentLocation,
    apply_manifest_delta,
    is_descriptor,
    locate_parent,
    read_descriptor,
)
from .paths import ROOT, SEPARATOR, join_path, parse_path, resolve_path
from .view import LazyView

__all__ = [
    "ValueKind",
    "classify",
    "is_primitive",
    "TreeCodec",
    "ManifestMode",
    "ParentLocation",
    "apply_manifest_delta",
    "is_descriptor",
    "locate_parent",
    "read_descriptor",
    "ROOT",
    "SEPARATOR",
    "join_path",
    "parse_path",
    "resolve_path",
    "LazyView",
]
