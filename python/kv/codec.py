"""Value codecs: lossless bytes <-> str for storage in a record's string map.

Encryption: scrypt + AES-256-GCM; payload JSON is
{"version": 1, "salt": hex, "iv": hex, "tag": hex, "data": base64}.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from kv.exceptions import KVError

KEY_LEN = 32
SALT_LEN = 16
IV_LEN = 12
TAG_LEN = 16
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


class CodecError(KVError, ValueError):
    """A stored string could not be decoded back into bytes."""


class ValueCodec(ABC):
    @abstractmethod
    def encode(self, value: bytes) -> str:
        ...

    @abstractmethod
    def decode(self, text: str) -> bytes:
        ...


class TextCodec(ValueCodec):
    """Store UTF-8 verbatim; other bytes survive as escaped surrogates.

    Strict-UTF-8 transports (JSON over HTTP) reject the surrogates, so use
    Base64Codec for binary values on such backends.
    """

    def encode(self, value: bytes) -> str:
        return value.decode("utf-8", "surrogateescape")

    def decode(self, text: str) -> bytes:
        return text.encode("utf-8", "surrogateescape")


class Base64Codec(ValueCodec):
    def encode(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    def decode(self, text: str) -> bytes:
        try:
            return base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise CodecError(f"Invalid base64 value: {e}") from e


def _derive_key(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LEN,
    )


def encrypt(plaintext: bytes, password: str) -> dict[str, Any]:
    """Encrypt bytes with password. Returns payload (version, salt, iv, tag, data)."""
    salt = os.urandom(SALT_LEN)
    iv = os.urandom(IV_LEN)
    aes = AESGCM(_derive_key(password, salt))
    ct_with_tag = aes.encrypt(iv, plaintext, None)
    return {
        "version": 1,
        "salt": salt.hex(),
        "iv": iv.hex(),
        "tag": ct_with_tag[-TAG_LEN:].hex(),
        "data": base64.b64encode(ct_with_tag[:-TAG_LEN]).decode("ascii"),
    }


def decrypt(payload: dict[str, Any], password: str) -> bytes:
    salt = bytes.fromhex(payload["salt"])
    iv = bytes.fromhex(payload["iv"])
    tag = bytes.fromhex(payload["tag"])
    if len(salt) != SALT_LEN:
        raise ValueError(f"Invalid salt length: expected {SALT_LEN}, got {len(salt)}")
    if len(iv) != IV_LEN:
        raise ValueError(f"Invalid iv length: expected {IV_LEN}, got {len(iv)}")
    if len(tag) != TAG_LEN:
        raise ValueError(f"Invalid tag length: expected {TAG_LEN}, got {len(tag)}")
    ciphertext = base64.b64decode(payload["data"]) + tag
    aes = AESGCM(_derive_key(password, salt))
    return aes.decrypt(iv, ciphertext, None)


def is_encrypted_payload(obj: Any) -> bool:
    """Return True if obj looks like an encrypted payload (version, salt, iv, tag, data)."""
    if not isinstance(obj, dict):
        return False
    return (
        obj.get("version") == 1
        and isinstance(obj.get("salt"), str)
        and isinstance(obj.get("iv"), str)
        and isinstance(obj.get("tag"), str)
        and isinstance(obj.get("data"), str)
    )


class EncryptedCodec(ValueCodec):
    """Encrypts every value with a password (or KV_CODEC_PASSWORD)."""

    def __init__(self, password: Optional[str] = None):
        self.password = password or os.environ.get("KV_CODEC_PASSWORD")
        if not self.password:
            raise ValueError("EncryptedCodec requires a password (KV_CODEC_PASSWORD or password=)")

    def encode(self, value: bytes) -> str:
        return json.dumps(encrypt(value, self.password), separators=(",", ":"))

    def decode(self, text: str) -> bytes:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise CodecError("Stored value is not an encrypted payload") from e
        if not is_encrypted_payload(payload):
            raise CodecError("Stored value is not an encrypted payload")
        try:
            return decrypt(payload, self.password)
        except InvalidTag as e:
            raise CodecError("Decryption failed (wrong password or corrupted value)") from e
        except ValueError as e:
            raise CodecError(str(e)) from e
