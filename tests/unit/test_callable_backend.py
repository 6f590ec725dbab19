from oxistore import OxiStorage
from oxistore.storage import CallableBackend, KeyValueProtocol


def test_callable_backend_forwards():
    data = {}
    deleted = []
    b = CallableBackend(data.get, data.__setitem__, lambda k: deleted.append(data.pop(k, None)))
    assert isinstance(b, KeyValueProtocol)
    b.set('x', 1)
    assert b.get('x') == 1
    b.delete('x')
    assert 'x' not in data
    assert deleted == [1]


def test_callable_backend_delete_falls_back_to_set_none():
    data = {}
    b = CallableBackend(data.get, data.__setitem__)
    b.set('x', 1)
    b.delete('x')
    assert data == {'x': None}
    assert b.get('x') is None


def test_storage_over_plain_functions():
    data = {}
    store = OxiStorage(CallableBackend(data.get, data.__setitem__, lambda k: data.pop(k, None)))
    store.set('a', {'b': [1, 2]})
    assert data['.a'] == {'type': 'object', 'keys': ['b']}
    assert data['.a.b'] == {'type': 'array', 'length': 2}
    assert store.materialize('a') == {'b': [1, 2]}


class DictGetSet:
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


def test_backend_without_delete_stores_none():
    raw = DictGetSet()
    store = OxiStorage(raw)
    assert isinstance(store.backend, CallableBackend)
    store.set('a', {'b': [1, 2]})
    store.delete('a')
    assert raw.data['.']['keys'] == []
    assert raw.data['.a'] is None
    assert raw.data['.a.b.0'] is None
    assert store.get('a') is None
    assert 'a' not in store
