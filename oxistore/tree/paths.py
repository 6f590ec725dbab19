"""Dotted path helpers.

Every record in the backend is addressed by a canonical path: a single
leading separator followed by the dot-joined segments. The root is ".".
"""
from __future__ import annotations
import re
from typing import List, Sequence, Union

from oxistore.errors import SerializationError

SEPARATOR = "."
ROOT = SEPARATOR
ESCAPED_SEPARATOR = "\\" + SEPARATOR

PathLike = Union[str, Sequence[Union[str, int]]]

_LEADING = re.compile(r"^\.+")


def resolve_path(path: PathLike) -> str:
    """Return the canonical form of `path`.

    Accepts a dotted string ("a.b", ".a.b") or a sequence of segments
    (["a", "b"], [".a", 0]). Runs of leading separators collapse to one.
    """
    if not isinstance(path, str):
        path = SEPARATOR.join(str(p) for p in path)
    if ESCAPED_SEPARATOR in path:
        raise SerializationError(
            "escaping the path separator is not supported",
            {"path": path},
        )
    return SEPARATOR + _LEADING.sub("", path)


def parse_path(path: PathLike) -> List[str]:
    """Split a path into its raw segments; the first is always ""."""
    resolved = resolve_path(path)
    if resolved == ROOT:
        return [""]
    return resolved.split(SEPARATOR)


def join_path(*parts: Union[str, int]) -> str:
    return resolve_path(list(parts))


def is_root(path: PathLike) -> bool:
    return resolve_path(path) == ROOT
