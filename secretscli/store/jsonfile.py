"""A SecretStore kept in a single JSON file of base64-encoded values."""

from __future__ import annotations

import base64
import binascii
import json
import os
import tempfile
import threading

from .base import (
    InvalidConfigurationError,
    SecretAlreadyExistsError,
    SecretNotFoundError,
    SecretStore,
    StoreError,
)


class JSONFileStore(SecretStore):
    """Secrets stored as a JSON object mapping keys to base64 values."""

    def __init__(self, file_path: str | os.PathLike[str]) -> None:
        if not os.fspath(file_path):
            raise InvalidConfigurationError("JSON file path cannot be empty")
        self.file_path = os.fspath(file_path)
        self._lock = threading.Lock()

    def open(self) -> None:
        """Create the file holding an empty JSON object if it does not exist."""
        with self._lock:
            try:
                fd = os.open(
                    self.file_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600
                )
            except FileExistsError:
                return
            except OSError as exc:
                raise StoreError(f"failed to create JSON file: {exc}") from exc
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(b"{}")
            except OSError as exc:
                raise StoreError(f"failed to create JSON file: {exc}") from exc

    def close(self) -> None:
        """Nothing to release for a file-based store."""

    def _load(self) -> dict[str, bytes]:
        with self._lock:
            try:
                with open(self.file_path, "rb") as handle:
                    content = handle.read()
            except FileNotFoundError:
                return {}
            except OSError as exc:
                raise StoreError(f"failed to read JSON file: {exc}") from exc

        if not content:
            return {}

        try:
            raw = json.loads(content)
        except (ValueError, UnicodeDecodeError) as exc:
            raise StoreError(f"failed to unmarshal JSON data: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict) or not all(
            isinstance(value, str) for value in raw.values()
        ):
            raise StoreError(
                "failed to unmarshal JSON data: expected an object of string values"
            )

        data: dict[str, bytes] = {}
        for key, encoded in raw.items():
            try:
                data[key] = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise StoreError(
                    f"failed to decode base64 value for key '{key}': {exc}"
                ) from exc
        return data

    def _save(self, data: dict[str, bytes]) -> None:
        encoded = {
            key: base64.b64encode(value).decode("ascii") for key, value in data.items()
        }
        content = json.dumps(encoded, indent=2, sort_keys=True).encode("utf-8")
        directory = os.path.dirname(os.path.abspath(self.file_path))

        with self._lock:
            try:
                fd, tmp_path = tempfile.mkstemp(prefix="secrets-json-", dir=directory)
            except OSError as exc:
                raise StoreError(
                    f"failed to create temp file for JSON save: {exc}"
                ) from exc
            try:
                try:
                    with os.fdopen(fd, "wb") as handle:
                        handle.write(content)
                except OSError as exc:
                    raise StoreError(f"failed to write to temp JSON file: {exc}") from exc
                try:
                    os.chmod(tmp_path, 0o600)
                except OSError as exc:
                    raise StoreError(
                        f"failed to set permissions on temp JSON file: {exc}"
                    ) from exc
                try:
                    os.replace(tmp_path, self.file_path)
                except OSError as exc:
                    raise StoreError(f"failed to rename temp JSON file: {exc}") from exc
            except StoreError:
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
                raise

    def create(self, key: str, encrypted_value: bytes) -> None:
        data = self._load()
        if key in data:
            raise SecretAlreadyExistsError(key)
        data[key] = bytes(encrypted_value)
        self._save(data)

    def read(self, key: str) -> bytes:
        data = self._load()
        try:
            return data[key]
        except KeyError:
            raise SecretNotFoundError(key) from None

    def update(self, key: str, encrypted_value: bytes) -> None:
        data = self._load()
        if key not in data:
            raise SecretNotFoundError(key)
        data[key] = bytes(encrypted_value)
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key not in data:
            raise SecretNotFoundError(key)
        del data[key]
        self._save(data)

    def list_keys(self) -> list[str]:
        return list(self._load())