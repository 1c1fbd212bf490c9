# secretscli

A small command-line tool for keeping encrypted key-value secrets. Each value
is sealed with NaCl secretbox (XSalsa20-Poly1305) under a random 24-byte nonce
before it is written, and stored in one of these backends:

- `sqlite`: a SQLite database file with a `secrets` table
  (`key TEXT UNIQUE NOT NULL`, `value BLOB NOT NULL`)
- `jsonfile`: a JSON object mapping each key to its base64-encoded ciphertext.
  The file is created as `{}` with mode 0600 if missing, and every change is
  written to a temporary file in the same directory and then moved into place.

## Installation

```
pip install .
```

This installs the `secrets-cli` command.

## Encryption key

Every command reads the encryption key from the `SECRETS_ENCRYPTION_KEY`
environment variable. The value must be base64 (line breaks are ignored);
after decoding it is padded with zero bytes or truncated to 32 bytes. If the
variable is unset or not valid base64, the command prints the error to
standard error and exits with status 1.

There is no command that creates a key. A fresh one can be produced from
Python:

```python
from secretscli.keys import generate_key

print(generate_key())  # base64 of 32 random bytes
```

`secretscli.keys` also has `save_key_to_file(path, key)`, which writes the key
base64 encoded to a file with mode 0600, and `load_key_from_file(path)`, which
reads it back and requires exactly 32 bytes after decoding. Keep the key
somewhere safe: secrets cannot be read back without it.

## Configuration

Defaults for the backend options are read from `~/.secrets-cli.json` when that
file can be opened. Every field is optional; a missing or `null` field is left
empty, and a field that is not a string is an error:

```json
{
  "backend_type": "sqlite",
  "sqlite_db_path": "/home/me/.secrets.db",
  "json_file_path": "/home/me/.secrets.json"
}
```

If the file exists but is not valid JSON, the command prints
`error loading config` with the reason and stops with a traceback.

Any setting can be overridden on the command line, before or after the
command name:

| Option               | Meaning                                         |
|----------------------|-------------------------------------------------|
| `--backend`          | `sqlite`, `jsonfile` or `mongodb-placeholder`   |
| `--sqlite-db`        | SQLite database file path                       |
| `--json-file`        | JSON file path                                  |
| `--mongo-uri`        | MongoDB connection URI                          |
| `--mongo-db`         | MongoDB database name                           |
| `--mongo-collection` | MongoDB collection name                         |

No backend is chosen by default; without one a command fails with
`unknown backend type`. An empty database or JSON file path is reported as an
invalid store configuration.

## Commands

Run without a command, `secrets-cli` prints its help and exits with status 0.

Store a new secret (aliases: `add`, `new`, `save`, `set`). Creating a key that
already exists is an error. With `--update` the existing value is replaced
instead; the key must then already exist, and a confirmation line is printed:

```
secrets-cli --backend sqlite --sqlite-db secrets.db create database secret
secrets-cli --backend sqlite --sqlite-db secrets.db create --update database secret
```

Print a decrypted secret (alias: `get`):

```
secrets-cli --backend sqlite --sqlite-db secrets.db read database
```

Delete a secret:

```
secrets-cli --backend sqlite --sqlite-db secrets.db delete database
```

List all keys in sorted order (alias: `ls`). An empty store prints
`No secrets found in backend '<backend>'.`:

```
secrets-cli --backend jsonfile --json-file secrets.json list
```

Generate a random password of the given length and store it (alias: `gen`).
The length must be a positive integer, and at least one character set must be
chosen: `-u/--uppercase`, `-l/--lowercase`, `-n/--numbers`. `--update`
replaces an existing key. The password is stored, not printed; use `read` to
see it:

```
secrets-cli --backend sqlite --sqlite-db secrets.db generate wifi 24 -u -l -n
```

Reading or deleting a key that does not exist prints
`secret with key '<key>' not found` to standard error and exits with status 1.
Other failures are printed to standard error and also exit with status 1.

## Library use

The pieces behind the command are importable:

```python
from secretscli.crypto import encrypt, decrypt
from secretscli.keys import load_key_from_env
from secretscli.store.sqlite import SQLiteStore

key = load_key_from_env()
with SQLiteStore("secrets.db") as store:
    store.create("api", encrypt(b"token", key))
    print(decrypt(store.read("api"), key))
```

Both `SQLiteStore` and `secretscli.store.jsonfile.JSONFileStore` implement
`secretscli.store.base.SecretStore`: `open`, `close`, `create`, `read`,
`update`, `delete` and `list_keys`, and work as context managers.
`secretscli.store.config` has the `StoreConfig` dataclass, `load_config(path,
base)` and `open_store(config)`, which builds and opens the selected backend.

Missing keys raise `SecretNotFoundError`; creating a key that exists raises
`SecretAlreadyExistsError`; both derive from `StoreError`. Encryption and
decryption failures, including a wrong key or tampered data, raise
`secretscli.crypto.CryptoError`.

## What it does not do

- The `mongodb-placeholder` backend stores nothing. Selecting it fails with
  `MongoDB backend has no storage engine available`; the `--mongo-*` options
  are accepted but have no effect.
- There is no command to generate or save an encryption key; use the
  functions in `secretscli.keys` shown above.

## Running the tests

```
pip install ".[test]"
pytest
```