"""Authenticated symmetric encryption of secret values with NaCl secretbox."""

from __future__ import annotations

import nacl.exceptions
import nacl.secret
import nacl.utils

NONCE_SIZE = nacl.secret.SecretBox.NONCE_SIZE
TAG_SIZE = nacl.secret.SecretBox.MACBYTES
KEY_SIZE = nacl.secret.SecretBox.KEY_SIZE


class CryptoError(Exception):
    """Raised when a value cannot be encrypted or decrypted."""


def _box(key: bytes, action: str) -> nacl.secret.SecretBox:
    if len(key) != KEY_SIZE:
        raise CryptoError(
            f"invalid key size for {action}: expected {KEY_SIZE} bytes, got {len(key)}"
        )
    return nacl.secret.SecretBox(bytes(key))


def encrypt(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt ``plaintext`` and return ``nonce || tag || ciphertext``."""
    box = _box(key, "encryption")
    nonce = nacl.utils.random(NONCE_SIZE)
    return bytes(box.encrypt(bytes(plaintext), nonce))


def decrypt(ciphertext_with_nonce: bytes, key: bytes) -> bytes:
    """Verify and decrypt a value produced by :func:`encrypt`."""
    box = _box(key, "decryption")
    if len(ciphertext_with_nonce) < NONCE_SIZE + TAG_SIZE:
        raise CryptoError("ciphertext is too short to contain nonce and tag")
    nonce = bytes(ciphertext_with_nonce[:NONCE_SIZE])
    ciphertext = bytes(ciphertext_with_nonce[NONCE_SIZE:])
    try:
        return box.decrypt(ciphertext, nonce)
    except nacl.exceptions.CryptoError as exc:
        raise CryptoError(
            "decryption failed (authentication tag mismatch or corrupted data)"
        ) from exc