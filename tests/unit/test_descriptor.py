import pytest

from oxistore.errors import DeserializationError
from oxistore.storage import MemoryStorage
from oxistore.tree.descriptor import (
    ManifestMode,
    apply_manifest_delta,
    child_keys,
    is_descriptor,
    locate_parent,
    read_descriptor,
    root_descriptor,
)


def test_is_descriptor():
    assert is_descriptor({"type": "object", "keys": []})
    assert is_descriptor({"type": "array", "length": 0})
    assert not is_descriptor({"type": "set"})
    assert not is_descriptor({"keys": []})
    assert not is_descriptor("object")
    assert not is_descriptor(None)


def test_object_insert_dedupes_and_keeps_order():
    d = {"type": "object", "keys": ["a", "b"]}
    out = apply_manifest_delta(ManifestMode.INSERT, d, "c")
    assert out["keys"] == ["a", "b", "c"]
    again = apply_manifest_delta(ManifestMode.INSERT, out, "a")
    assert again["keys"] == ["a", "b", "c"]
    # input is not mutated
    assert d["keys"] == ["a", "b"]


def test_object_remove():
    d = {"root": True, "type": "object", "keys": ["a", "b"]}
    out = apply_manifest_delta(ManifestMode.REMOVE, d, "a")
    assert out == {"root": True, "type": "object", "keys": ["b"]}
    assert apply_manifest_delta(ManifestMode.REMOVE, out, "zzz")["keys"] == ["b"]


def test_array_insert_and_remove():
    d = {"type": "array", "length": 2}
    assert apply_manifest_delta(ManifestMode.INSERT, d, "2")["length"] == 3
    # overwriting an existing index keeps the length
    assert apply_manifest_delta(ManifestMode.INSERT, d, "1")["length"] == 2
    assert apply_manifest_delta(ManifestMode.REMOVE, d, "1")["length"] == 1
    empty = {"type": "array", "length": 0}
    assert apply_manifest_delta(ManifestMode.REMOVE, empty, "0")["length"] == 0


def test_invalid_mode_and_descriptor():
    with pytest.raises(ValueError):
        apply_manifest_delta("update", {"type": "object", "keys": []}, "a")
    with pytest.raises(DeserializationError):
        apply_manifest_delta(ManifestMode.INSERT, {"value": 1}, "a")


def test_child_keys():
    assert child_keys({"type": "object", "keys": ["x", "y"]}) == ["x", "y"]
    assert child_keys({"type": "array", "length": 3}) == ["0", "1", "2"]


def test_read_descriptor_ignores_leaves():
    m = MemoryStorage({".": root_descriptor(), ".a": 5})
    assert read_descriptor(m, ".")["root"] is True
    assert read_descriptor(m, "a") is None
    assert read_descriptor(m, "missing") is None


def test_locate_parent():
    m = MemoryStorage({
        ".": {"root": True, "type": "object", "keys": ["a"]},
        ".a": {"type": "object", "keys": []},
    })
    loc = locate_parent(m, "a.b")
    assert loc.path == ".a.b"
    assert loc.parent_path == ".a"
    assert loc.child_key == "b"
    assert loc.parent["type"] == "object"

    top = locate_parent(m, "a")
    assert top.parent_path == "."


def test_locate_parent_failures():
    m = MemoryStorage({".": root_descriptor(), ".leaf": 1})
    with pytest.raises(DeserializationError):
        locate_parent(m, "missing.child")
    # a leaf is not a container
    with pytest.raises(DeserializationError):
        locate_parent(m, "leaf.child")
    with pytest.raises(DeserializationError):
        locate_parent(m, ".")
    with pytest.raises(DeserializationError):
        locate_parent(m, "a.")
