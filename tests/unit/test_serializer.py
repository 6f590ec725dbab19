import pytest
from cryptography.fernet import Fernet

from oxistore.storage.serializer import (
    EncryptedSerializer,
    JSONSerializer,
    PickleSerializer,
    YAMLSerializer,
    get_serializer,
)

RECORD = {'type': 'object', 'keys': ['b', 'a']}


@pytest.mark.parametrize('serializer', [JSONSerializer(), YAMLSerializer(), PickleSerializer()])
def test_plain_serializers_keep_descriptor_order(serializer):
    loaded = serializer.load(serializer.dump(RECORD))
    assert loaded == RECORD
    assert loaded['keys'] == ['b', 'a']
    assert serializer.load(serializer.dump(None)) is None


def test_yaml_is_human_readable():
    text = YAMLSerializer().dump({'type': 'array', 'length': 2}).decode('utf-8')
    assert 'type: array' in text
    assert 'length: 2' in text


def test_encrypted_with_key():
    s = EncryptedSerializer(key=Fernet.generate_key())
    blob = s.dump(RECORD)
    assert b'keys' not in blob
    assert s.load(blob) == RECORD


def test_encrypted_with_password():
    s = EncryptedSerializer(password='pw', iterations=1000)
    blob = s.dump('secret')
    assert s.load(blob) == 'secret'
    # every payload has its own salt
    assert s.dump('secret') != blob

    wrong = EncryptedSerializer(password='other', iterations=1000)
    with pytest.raises(ValueError):
        wrong.load(blob)


def test_encrypted_requires_secret():
    with pytest.raises(ValueError):
        EncryptedSerializer()


def test_get_serializer():
    assert isinstance(get_serializer('json'), JSONSerializer)
    assert isinstance(get_serializer('yaml'), YAMLSerializer)
    assert isinstance(get_serializer('encrypted', password='pw'), EncryptedSerializer)
    with pytest.raises(ValueError):
        get_serializer('xml')
