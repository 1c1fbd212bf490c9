"""A SecretStore kept in a SQLite database."""

from __future__ import annotations

import os
import sqlite3

from .base import (
    InvalidConfigurationError,
    SecretAlreadyExistsError,
    SecretNotFoundError,
    SecretStore,
    StoreError,
)

TABLE_NAME = "secrets"


class SQLiteStore(SecretStore):
    """Secrets stored as rows of (key TEXT UNIQUE, value BLOB)."""

    def __init__(self, db_path: str | os.PathLike[str]) -> None:
        if not os.fspath(db_path):
            raise InvalidConfigurationError("SQLite database path cannot be empty")
        self.db_path = os.fspath(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("sqlite store is not open")
        return self._conn

    def open(self) -> None:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            raise StoreError(f"failed to open database: {exc}") from exc
        try:
            with conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {TABLE_NAME} ("
                    " key TEXT UNIQUE NOT NULL,"
                    " value BLOB NOT NULL)"
                )
        except sqlite3.Error as exc:
            conn.close()
            raise StoreError(f"failed to create table '{TABLE_NAME}': {exc}") from exc
        self._conn = conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def create(self, key: str, encrypted_value: bytes) -> None:
        conn = self._connection
        try:
            with conn:
                conn.execute(
                    f"INSERT INTO {TABLE_NAME} (key, value) VALUES (?, ?)",
                    (key, bytes(encrypted_value)),
                )
        except sqlite3.IntegrityError as exc:
            raise SecretAlreadyExistsError(key) from exc
        except sqlite3.Error as exc:
            raise StoreError(f"sqlite create failed: {exc}") from exc

    def read(self, key: str) -> bytes:
        try:
            row = self._connection.execute(
                f"SELECT value FROM {TABLE_NAME} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"sqlite read failed: {exc}") from exc
        if row is None:
            raise SecretNotFoundError(key)
        return bytes(row[0])

    def _modify(self, action: str, sql: str, params: tuple, key: str) -> None:
        conn = self._connection
        try:
            with conn:
                cursor = conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise StoreError(f"sqlite {action} failed: {exc}") from exc
        if cursor.rowcount == 0:
            raise SecretNotFoundError(key)

    def update(self, key: str, encrypted_value: bytes) -> None:
        self._modify(
            "update",
            f"UPDATE {TABLE_NAME} SET value = ? WHERE key = ?",
            (bytes(encrypted_value), key),
            key,
        )

    def delete(self, key: str) -> None:
        self._modify("delete", f"DELETE FROM {TABLE_NAME} WHERE key = ?", (key,), key)

    def list_keys(self) -> list[str]:
        try:
            rows = self._connection.execute(f"SELECT key FROM {TABLE_NAME}").fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"sqlite list keys failed: {exc}") from exc
        return [key for (key,) in rows]