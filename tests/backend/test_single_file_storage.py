import json

from oxistore import OxiStorage
from oxistore.storage.serializer import YAMLSerializer
from oxistore.storage.single_file_backend import SingleFileStorage


def test_all_records_in_one_document(tmp_path):
    b = SingleFileStorage(tmp_path / 'store')
    assert b.file_path == tmp_path / 'store.json'
    store = OxiStorage(b)
    store.set('a', [1, 2])

    doc = json.loads(b.file_path.read_text(encoding='utf-8'))
    assert doc['.a'] == {'type': 'array', 'length': 2}
    assert doc['.a.1'] == 2
    assert doc['.']['keys'] == ['a']
    assert 'oxi_storage_metadata' in doc


def test_explicit_suffix_is_kept(tmp_path):
    b = SingleFileStorage(tmp_path / 'values.data', serializer=YAMLSerializer())
    b.set('k', 'v')
    assert b.file_path.name == 'values.data'
    assert SingleFileStorage(tmp_path / 'values.data', serializer=YAMLSerializer()).get('k') == 'v'


def test_delete_persists(tmp_path):
    b = SingleFileStorage(tmp_path / 'store')
    b.set('k', 'v')
    b.set('j', 1)
    b.delete('k')
    b.delete('k')
    assert b.get('k') is None
    reopened = SingleFileStorage(tmp_path / 'store')
    assert reopened.get('k') is None
    assert list(reopened.keys()) == ['j']


def test_reopen_restores_tree(tmp_path):
    OxiStorage(SingleFileStorage(tmp_path / 'store')).set('a', {'b': {'c': True}})
    store = OxiStorage(SingleFileStorage(tmp_path / 'store'))
    assert store.get('a')['b']['c'] is True
