"""Backend configuration and construction of the selected secret store."""

from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass
from pathlib import Path

from .base import SecretStore, StoreError
from .jsonfile import JSONFileStore
from .sqlite import SQLiteStore

CONFIG_FILE_NAME = ".secrets-cli.json"
BACKENDS = ("sqlite", "jsonfile", "mongodb-placeholder")


@dataclass
class StoreConfig:
    """Settings selecting and configuring a storage backend."""

    backend_type: str = ""
    sqlite_db_path: str = ""
    json_file_path: str = ""
    mongo_uri: str = ""
    mongo_database: str = ""
    mongo_collection: str = ""


def _default_path() -> Path:
    try:
        return Path.home() / CONFIG_FILE_NAME
    except RuntimeError as exc:
        raise StoreError(f"cannot determine home directory: {exc}") from exc


def _parse(text: str) -> StoreConfig:
    try:
        raw, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except ValueError as exc:
        raise StoreError(f"failed to decode config: {exc}") from exc
    if raw is None:
        return StoreConfig()
    if not isinstance(raw, dict):
        raise StoreError("failed to decode config: expected a JSON object")
    values = {}
    for field in dataclasses.fields(StoreConfig):
        value = raw.get(field.name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise StoreError(
                f"failed to decode config: field '{field.name}' must be a string"
            )
        values[field.name] = value
    return StoreConfig(**values)


def load_config(
    path: str | os.PathLike[str] | None = None,
    base: StoreConfig | None = None,
) -> StoreConfig:
    """Fill the empty fields of ``base`` from the JSON config file.

    The file defaults to ``~/.secrets-cli.json``; if it cannot be opened,
    ``base`` is returned unchanged.
    """
    base = base if base is not None else StoreConfig()
    config_path = Path(path) if path is not None else _default_path()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError:
        return base
    loaded = _parse(text)
    updates = {
        field.name: getattr(loaded, field.name)
        for field in dataclasses.fields(StoreConfig)
        if not getattr(base, field.name)
    }
    return dataclasses.replace(base, **updates)


def open_store(config: StoreConfig) -> SecretStore:
    """Build the backend named by ``config`` and open it."""
    backend = config.backend_type
    store: SecretStore
    if backend == "sqlite":
        store = SQLiteStore(config.sqlite_db_path)
    elif backend == "jsonfile":
        store = JSONFileStore(config.json_file_path)
    elif backend == "mongodb-placeholder":
        raise StoreError(
            "failed to initialize store backend: "
            "MongoDB backend has no storage engine available"
        )
    else:
        raise StoreError(f"unknown backend type: {backend}")
    try:
        store.open()
    except StoreError as exc:
        raise StoreError(f"failed to initialize store backend: {exc}") from exc
    return store