from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueProtocol(Protocol):
    """Flat key/value backend protocol mirroring `oxistore.storage.StorageBackend`.

    Every key is an independent slot; `get` returns None for keys that were
    never written and deleting an absent key must not raise. Implementations
    commit each `set`/`delete` immediately.
    """

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...
