"""Symmetric encryption of stored values.

Values are serialized to JSON, encrypted with AES-256-CBC and wrapped in a
JSON envelope ``{"iv": <base64>, "content": <base64>}``. The key is derived
with scrypt from a per-install passphrase and a fixed salt.
"""

from __future__ import annotations

import base64
import binascii
import os
import secrets
from collections.abc import Callable
from functools import lru_cache
from typing import Any

import msgspec
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher as _AESCipher
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers import modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

# scrypt parameters
KDF_SALT = b"salt"
KDF_N = 2**14
KDF_R = 8
KDF_P = 1
KEY_LENGTH_BYTES = 32  # AES-256

IV_LENGTH_BYTES = 16
BLOCK_SIZE_BITS = 128

PASSPHRASE_PREFIX = "bwbridge-"


class Envelope(msgspec.Struct):
    """Ciphertext envelope as persisted in the store."""

    iv: str
    content: str


@lru_cache(maxsize=8)
def derive_key(passphrase: str) -> bytes:
    """Derive a 256-bit AES key from the passphrase and the fixed salt."""
    kdf = Scrypt(salt=KDF_SALT, length=KEY_LENGTH_BYTES, n=KDF_N, r=KDF_R, p=KDF_P)
    return kdf.derive(passphrase.encode("utf-8"))


def generate_passphrase(install_id: str | None = None) -> str:
    """Build a new per-install passphrase."""
    return PASSPHRASE_PREFIX + (install_id or secrets.token_hex(16))


class Cipher:
    """Encrypts JSON-serializable objects into string envelopes."""

    def __init__(self, passphrase: str | Callable[[], str]) -> None:
        self._passphrase = passphrase

    def _key(self) -> bytes:
        passphrase = self._passphrase
        if callable(passphrase):
            passphrase = passphrase()
        return derive_key(passphrase)

    def encrypt(self, data: Any) -> str:
        """Encrypt an object into a JSON envelope string."""
        iv = os.urandom(IV_LENGTH_BYTES)
        plaintext = msgspec.json.encode(data)

        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = _AESCipher(algorithms.AES(self._key()), modes.CBC(iv)).encryptor()
        content = encryptor.update(padded) + encryptor.finalize()

        envelope = Envelope(
            iv=base64.b64encode(iv).decode("ascii"),
            content=base64.b64encode(content).decode("ascii"),
        )
        return msgspec.json.encode(envelope).decode("utf-8")

    def decrypt(self, ciphertext: str | bytes) -> Any | None:
        """Decrypt an envelope string.

        Returns:
            The decoded object, or None if the envelope is malformed,
            tampered with, or was encrypted under another key.
        """
        try:
            envelope = msgspec.json.decode(ciphertext, type=Envelope)
            iv = base64.b64decode(envelope.iv, validate=True)
            content = base64.b64decode(envelope.content, validate=True)

            decryptor = _AESCipher(algorithms.AES(self._key()), modes.CBC(iv)).decryptor()
            padded = decryptor.update(content) + decryptor.finalize()

            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return msgspec.json.decode(plaintext)
        except (msgspec.DecodeError, binascii.Error, ValueError, TypeError):
            return None
