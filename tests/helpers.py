from typing import Any, Dict

from oxistore.tree import is_descriptor, join_path
from oxistore.tree.descriptor import child_keys


def tree_records(backend) -> Dict[str, Any]:
    """Return every dotted-path record held by an enumerable backend."""
    return {k: backend.get(k) for k in backend.keys() if k.startswith(".")}


def assert_manifests_consistent(backend) -> None:
    """Every container names exactly the child records stored below it."""
    records = tree_records(backend)
    for key in records:
        if key == ".":
            continue
        parent, _, child = key.rpartition(".")
        parent = parent or "."
        descriptor = records.get(parent)
        assert is_descriptor(descriptor), f"orphan record {key}"
        assert child in child_keys(descriptor), f"{key} missing from manifest of {parent}"
    for key, record in records.items():
        if is_descriptor(record):
            for child in child_keys(record):
                assert join_path(key, child) in records, f"{key} declares missing child {child}"
