"""Record serializers for backends that persist bytes.

File-based backends hand every record (a JSON primitive or a container
descriptor) to a serializer. `extension` is used for on-disk file names.
"""
from typing import Any, Optional, Protocol
import base64
import json
import os
import pickle

import yaml
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


class Serializer(Protocol):
    """Serialize/deserialize records to bytes.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    """

    extension: str

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


class JSONSerializer:
    """Serializer using JSON (text). Key order of descriptors is preserved."""

    extension = ".json"

    def dump(self, value: Any) -> bytes:
        return json.dumps(value, ensure_ascii=False).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class YAMLSerializer:
    """Serializer using YAML (text), human-editable on disk."""

    extension = ".yml"

    def dump(self, value: Any) -> bytes:
        return yaml.safe_dump(value, sort_keys=False, allow_unicode=True).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return yaml.safe_load(data.decode("utf-8"))


class PickleSerializer:
    """Binary serializer; fastest, but only readable from Python."""

    extension = ".pkl"

    def dump(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def load(self, data: bytes) -> Any:
        return pickle.loads(data)


class EncryptedSerializer:
    """Encrypt payloads of an inner serializer with Fernet.

    Configure either a Fernet `key` or a `password`. In password mode every
    payload gets its own random salt and the key is derived with PBKDF2;
    the salt and iteration count travel in the payload frame.
    """

    extension = ".enc"

    def __init__(
        self,
        *,
        key: Optional[bytes] = None,
        password: Optional[str] = None,
        iterations: int = 390000,
        base_serializer: Optional[Serializer] = None,
    ) -> None:
        if key is None and password is None:
            raise ValueError("EncryptedSerializer requires either `key` or `password`")
        self._key = key
        self._password = password
        self._iterations = iterations
        self.base_serializer = base_serializer or JSONSerializer()

    @staticmethod
    def _b64(raw: bytes) -> str:
        return base64.urlsafe_b64encode(raw).decode("ascii")

    def _password_key(self, salt: bytes, iterations: int) -> bytes:
        if self._password is None:
            raise ValueError("serializer was not configured with a password")
        kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=iterations)
        return base64.urlsafe_b64encode(kdf.derive(self._password.encode("utf-8")))

    def dump(self, value: Any) -> bytes:
        inner = self.base_serializer.dump(value)
        if self._password is not None:
            salt = os.urandom(16)
            token = Fernet(self._password_key(salt, self._iterations)).encrypt(inner)
            frame = {
                "v": 1,
                "mode": "password",
                "iterations": self._iterations,
                "salt": self._b64(salt),
                "ct": self._b64(token),
            }
        else:
            frame = {"v": 1, "mode": "key", "ct": self._b64(Fernet(self._key).encrypt(inner))}
        return json.dumps(frame).encode("utf-8")

    def load(self, data: bytes) -> Any:
        frame = json.loads(data.decode("utf-8"))
        mode = frame.get("mode")
        token = base64.urlsafe_b64decode(frame["ct"].encode("ascii"))
        if mode == "password":
            salt = base64.urlsafe_b64decode(frame["salt"].encode("ascii"))
            fernet = Fernet(self._password_key(salt, frame.get("iterations", self._iterations)))
        elif mode == "key":
            if self._key is None:
                raise ValueError("serializer was not configured with a key")
            fernet = Fernet(self._key)
        else:
            raise ValueError("unknown frame format")
        try:
            return self.base_serializer.load(fernet.decrypt(token))
        except InvalidToken as e:
            raise ValueError("payload could not be decrypted") from e


SERIALIZERS = {
    "json": JSONSerializer,
    "yaml": YAMLSerializer,
    "pickle": PickleSerializer,
}


def get_serializer(name: str, *, password: Optional[str] = None, key: Optional[bytes] = None) -> Serializer:
    """Build a serializer by name ("json", "yaml", "pickle" or "encrypted")."""
    if name == "encrypted":
        return EncryptedSerializer(key=key, password=password)
    try:
        return SERIALIZERS[name]()
    except KeyError:
        raise ValueError(f"unknown serializer: {name!r}") from None
