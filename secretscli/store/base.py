"""The storage interface for encrypted secrets and its errors."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StoreError(Exception):
    """Base class for storage failures."""


class SecretNotFoundError(StoreError):
    """Raised when no secret exists under the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"secret not found: secret with key '{key}'")


class SecretAlreadyExistsError(StoreError):
    """Raised when creating a secret under a key that is already taken."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"secret already exists: secret with key '{key}'")


class InvalidConfigurationError(StoreError):
    """Raised when a backend is configured with unusable settings."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid store configuration: {detail}")


class SecretStore(ABC):
    """A key-value store of encrypted secret values.

    Usable as a context manager: entering opens the store, leaving closes it.
    """

    @abstractmethod
    def open(self) -> None:
        """Prepare the backend (connect, create files or tables)."""

    @abstractmethod
    def close(self) -> None:
        """Release any resources held by the backend."""

    @abstractmethod
    def create(self, key: str, encrypted_value: bytes) -> None:
        """Store a new value; fails if ``key`` already exists."""

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Return the value for ``key``; raises SecretNotFoundError if absent."""

    @abstractmethod
    def update(self, key: str, encrypted_value: bytes) -> None:
        """Replace the value for ``key``; raises SecretNotFoundError if absent."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; raises SecretNotFoundError if absent."""

    @abstractmethod
    def list_keys(self) -> list[str]:
        """Return every stored key."""

    def __enter__(self) -> SecretStore:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()