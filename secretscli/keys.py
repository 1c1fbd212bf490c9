"""Generation and loading of the base64-encoded encryption key."""

from __future__ import annotations

import base64
import binascii
import os
import secrets
from collections.abc import Mapping
from pathlib import Path

ENV_KEY_NAME = "SECRETS_ENCRYPTION_KEY"
SECRETBOX_KEY_SIZE = 32


class KeyLoadError(Exception):
    """Raised when an encryption key cannot be produced, read or decoded."""


def _decode(text: str) -> bytes:
    # Line breaks are tolerated, anything else must be strict base64.
    cleaned = text.replace("\r", "").replace("\n", "")
    return base64.b64decode(cleaned, validate=True)


def generate_key() -> str:
    """Return a new random 32-byte key, base64 encoded."""
    return base64.b64encode(secrets.token_bytes(SECRETBOX_KEY_SIZE)).decode("ascii")


def load_key_from_env(environ: Mapping[str, str] | None = None) -> bytes:
    """Read the key from the environment, padding or trimming it to 32 bytes."""
    env = os.environ if environ is None else environ
    encoded = env.get(ENV_KEY_NAME, "")
    if not encoded:
        raise KeyLoadError(
            f"encryption key environment variable '{ENV_KEY_NAME}' is not set"
        )
    try:
        key = _decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise KeyLoadError(f"failed to decode base64 key from environment: {exc}") from exc
    return key[:SECRETBOX_KEY_SIZE].ljust(SECRETBOX_KEY_SIZE, b"\x00")


def save_key_to_file(path: str | os.PathLike[str], key: bytes) -> None:
    """Write ``key`` base64 encoded to ``path``, readable by the owner only."""
    encoded = base64.b64encode(bytes(key))
    try:
        fd = os.open(os.fspath(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    except OSError as exc:
        raise KeyLoadError(f"failed to open key file for writing: {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(encoded)
    except OSError as exc:
        raise KeyLoadError(f"failed to write key to file: {exc}") from exc


def load_key_from_file(path: str | os.PathLike[str]) -> bytes:
    """Read a base64 key from ``path``; it must decode to exactly 32 bytes."""
    try:
        content = Path(path).read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as exc:
        raise KeyLoadError(f"failed to read key file: {exc}") from exc
    try:
        key = _decode(content)
    except (binascii.Error, ValueError) as exc:
        raise KeyLoadError(f"failed to decode base64 key from file: {exc}") from exc
    if len(key) != SECRETBOX_KEY_SIZE:
        raise KeyLoadError(
            f"invalid key size in file: expected {SECRETBOX_KEY_SIZE} bytes, "
            f"got {len(key)} bytes after decoding"
        )
    return key