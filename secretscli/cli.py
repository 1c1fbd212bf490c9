"""Command-line interface for managing encrypted secrets."""

from __future__ import annotations

import argparse
import dataclasses
import re
import secrets
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from .crypto import CryptoError, decrypt, encrypt
from .keys import KeyLoadError, load_key_from_env
from .store.base import SecretNotFoundError, SecretStore, StoreError
from .store.config import StoreConfig, load_config, open_store

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
NUMBERS = "0123456789"

_LENGTH_PATTERN = re.compile(r"\s*([+-]?\d+)")

_STORE_OPTIONS = (
    ("--backend", "backend_type",
     "Storage backend type (sqlite, jsonfile, mongodb-placeholder)"),
    ("--sqlite-db", "sqlite_db_path", "SQLite database file path"),
    ("--json-file", "json_file_path", "JSON file path"),
    ("--mongo-uri", "mongo_uri", "MongoDB connection URI"),
    ("--mongo-db", "mongo_database", "MongoDB database name"),
    ("--mongo-collection", "mongo_collection", "MongoDB collection name"),
)


class _CommandError(Exception):
    """A failure reported with an ``Error:`` prefix."""


class _Abort(Exception):
    """A failure whose message is printed as it stands."""


def parse_length(arg: str) -> int:
    """Read a leading decimal integer from ``arg``."""
    match = _LENGTH_PATTERN.match(arg)
    if match is None:
        raise ValueError(f"invalid length argument: expected integer, got {arg!r}")
    return int(match.group(1))


def generate_password(length: int, charset: str) -> str:
    """Return ``length`` random characters drawn from ``charset``."""
    if not charset:
        raise ValueError("character set must not be empty")
    return "".join(charset[b % len(charset)] for b in secrets.token_bytes(length))


def _add_store_options(
    parser: argparse.ArgumentParser, defaults: StoreConfig, suppress: bool
) -> None:
    for flag, dest, help_text in _STORE_OPTIONS:
        default = argparse.SUPPRESS if suppress else getattr(defaults, dest)
        parser.add_argument(flag, dest=dest, default=default, help=help_text)


def build_parser(defaults: StoreConfig | None = None) -> argparse.ArgumentParser:
    """Build the argument parser, using ``defaults`` for the backend options."""
    defaults = defaults if defaults is not None else StoreConfig()
    parser = argparse.ArgumentParser(
        prog="secrets-cli",
        description="Secure Secrets Storage CLI with multiple backends. "
        "Manages encrypted key-value secrets using different storage backends "
        "(sqlite, jsonfile, mongodb-placeholder).",
    )
    _add_store_options(parser, defaults, suppress=False)

    common = argparse.ArgumentParser(add_help=False)
    _add_store_options(common, defaults, suppress=True)

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    create = commands.add_parser(
        "create", aliases=["add", "new", "save", "set"], parents=[common],
        help="Create a new secret",
        description="Creates a new encrypted secret with the given key and value.",
    )
    create.add_argument("key")
    create.add_argument("value")
    create.add_argument("--update", action="store_true",
                        help="Update the secret if it already exists")
    create.set_defaults(command="create", handler=_run_create)

    read = commands.add_parser(
        "read", aliases=["get"], parents=[common],
        help="Read a secret by its key",
        description="Retrieves and decrypts a secret value based on its key.",
    )
    read.add_argument("key")
    read.set_defaults(command="read", handler=_run_read)

    delete = commands.add_parser(
        "delete", parents=[common],
        help="Delete a secret by its key",
        description="Deletes a secret and its encrypted value based on its key.",
    )
    delete.add_argument("key")
    delete.set_defaults(command="delete", handler=_run_delete)

    listing = commands.add_parser(
        "list", aliases=["ls"], parents=[common],
        help="List all secret keys",
        description="Retrieves and lists the keys of all available secrets in the store.",
    )
    listing.set_defaults(command="list", handler=_run_list)

    generate = commands.add_parser(
        "generate", aliases=["gen"], parents=[common],
        help="Generate and store a random password",
        description="Generates a random password of the specified length using the "
        "selected character sets and stores it as a secret under the given key.",
    )
    generate.add_argument("key")
    generate.add_argument("length")
    generate.add_argument("-u", "--uppercase", action="store_true",
                          help="Include uppercase letters")
    generate.add_argument("-l", "--lowercase", action="store_true",
                          help="Include lowercase letters")
    generate.add_argument("-n", "--numbers", action="store_true",
                          help="Include numbers")
    generate.add_argument("--update", action="store_true",
                          help="Update the secret if it already exists")
    generate.set_defaults(command="generate", handler=_run_generate)

    return parser


@contextmanager
def _opened(config: StoreConfig, fatal: bool = False) -> Iterator[SecretStore]:
    try:
        store = open_store(config)
    except StoreError as exc:
        error = _Abort if fatal else _CommandError
        raise error(f"failed to get store: {exc}") from exc
    try:
        yield store
    finally:
        try:
            store.close()
        except Exception as exc:  # closing must not hide the command's outcome
            print(f"Error closing store connection: {exc}", file=sys.stderr)


def _store_value(
    config: StoreConfig, key: bytes, name: str, value: bytes,
    update: bool, what: str, announce: bool,
) -> None:
    with _opened(config) as store:
        try:
            encrypted = encrypt(value, key)
        except CryptoError as exc:
            raise _CommandError(f"failed to encrypt {what}: {exc}") from exc
        if update:
            try:
                store.update(name, encrypted)
            except StoreError as exc:
                raise _Abort(f"failed to update secret in store: {exc}") from exc
            if announce:
                print(f"Secret '{name}' updated successfully using backend "
                      f"'{config.backend_type}'.")
            return
        try:
            store.create(name, encrypted)
        except StoreError as exc:
            raise _Abort(f"failed to create secret in store: {exc}") from exc


def _run_create(args: argparse.Namespace, config: StoreConfig, key: bytes) -> None:
    if not args.key or not args.value:
        raise _CommandError("both key and value arguments are required")
    _store_value(config, key, args.key, args.value.encode("utf-8"),
                 args.update, "value", announce=True)


def _run_read(args: argparse.Namespace, config: StoreConfig, key: bytes) -> None:
    if not args.key:
        raise _CommandError("key argument is required")
    with _opened(config) as store:
        try:
            encrypted = store.read(args.key)
        except SecretNotFoundError as exc:
            raise _Abort(f"secret with key '{args.key}' not found") from exc
        except StoreError as exc:
            raise _Abort(f"failed to read secret from store: {exc}") from exc
    try:
        plaintext = decrypt(encrypted, key)
    except CryptoError as exc:
        raise _Abort(
            f"failed to decrypt value for key '{args.key}': {exc}"
        ) from exc
    print(plaintext.decode("utf-8", errors="replace"))


def _run_delete(args: argparse.Namespace, config: StoreConfig, key: bytes) -> None:
    if not args.key:
        raise _CommandError("key argument is required")
    with _opened(config) as store:
        try:
            store.delete(args.key)
        except SecretNotFoundError as exc:
            raise _Abort(f"secret with key '{args.key}' not found") from exc
        except StoreError as exc:
            raise _Abort(f"failed to delete secret from store: {exc}") from exc


def _run_list(args: argparse.Namespace, config: StoreConfig, key: bytes) -> None:
    with _opened(config, fatal=True) as store:
        try:
            names = store.list_keys()
        except StoreError as exc:
            raise _Abort(f"failed to list secrets from store: {exc}") from exc
    if not names:
        print(f"No secrets found in backend '{config.backend_type}'.")
        return
    for name in sorted(names):
        print(name)


def _run_generate(args: argparse.Namespace, config: StoreConfig, key: bytes) -> None:
    try:
        length = parse_length(args.length)
    except ValueError as exc:
        raise _CommandError(str(exc)) from exc
    if not args.key:
        raise _CommandError("key argument is required")
    if length <= 0:
        raise _CommandError("password length must be positive")

    charset = "".join(
        chars for enabled, chars in (
            (args.uppercase, UPPERCASE),
            (args.lowercase, LOWERCASE),
            (args.numbers, NUMBERS),
        ) if enabled
    )
    if not charset:
        raise _CommandError(
            "at least one of --uppercase, --lowercase, or --numbers must be set"
        )
    generated = generate_password(length, charset)
    _store_value(config, key, args.key, generated.encode("ascii"),
                 args.update, "password", announce=False)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    try:
        defaults = load_config()
    except StoreError as exc:
        print("error loading config", exc)
        raise

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    try:
        key = load_key_from_env()
    except KeyLoadError as exc:
        print(f"Encryption key error: {exc}", file=sys.stderr)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    config = StoreConfig(
        **{field.name: getattr(args, field.name)
           for field in dataclasses.fields(StoreConfig)}
    )
    try:
        args.handler(args, config, key)
    except _CommandError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except _Abort as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())