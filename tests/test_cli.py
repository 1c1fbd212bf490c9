import base64
import json
import os

import pytest

from secretscli.cli import (
    LOWERCASE,
    NUMBERS,
    UPPERCASE,
    build_parser,
    generate_password,
    main,
    parse_length,
)
from secretscli.crypto import decrypt
from secretscli.keys import ENV_KEY_NAME, generate_key, load_key_from_env
from secretscli.store.base import StoreError
from secretscli.store.config import StoreConfig


@pytest.fixture
def env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv(ENV_KEY_NAME, generate_key())
    return home


@pytest.fixture
def json_args(tmp_path):
    return ["--backend", "jsonfile", "--json-file", str(tmp_path / "secrets.json")]


def run(args, capsys):
    code = main(args)
    out, err = capsys.readouterr()
    return code, out, err


@pytest.mark.parametrize(
    "arg, expected",
    [("12", 12), (" 7", 7), ("-3", -3), ("+4", 4), ("5abc", 5)],
)
def test_parse_length_reads_leading_integer(arg, expected):
    assert parse_length(arg) == expected


@pytest.mark.parametrize("arg", ["abc", "", "x12"])
def test_parse_length_rejects_non_numbers(arg):
    with pytest.raises(ValueError, match="invalid length argument"):
        parse_length(arg)


def test_generate_password_uses_charset():
    result = generate_password(64, "ab")
    assert len(result) == 64
    assert set(result) <= {"a", "b"}


def test_generate_password_single_character_charset():
    assert generate_password(5, "x") == "xxxxx"


def test_generate_password_zero_length():
    assert generate_password(0, NUMBERS) == ""


def test_generate_password_empty_charset():
    with pytest.raises(ValueError):
        generate_password(4, "")


def test_build_parser_uses_defaults():
    defaults = StoreConfig(backend_type="sqlite", sqlite_db_path="db.sqlite")
    args = build_parser(defaults).parse_args(["list"])
    assert args.backend_type == "sqlite"
    assert args.sqlite_db_path == "db.sqlite"
    assert args.command == "list"


def test_build_parser_flag_after_command_overrides_default():
    defaults = StoreConfig(backend_type="sqlite")
    args = build_parser(defaults).parse_args(["ls", "--backend", "jsonfile"])
    assert args.backend_type == "jsonfile"
    assert args.command == "list"


def test_build_parser_aliases():
    parser = build_parser(StoreConfig())
    assert parser.parse_args(["get", "name"]).command == "read"
    assert parser.parse_args(["set", "name", "v"]).command == "create"
    assert parser.parse_args(["gen", "name", "8", "-u"]).command == "generate"


def test_create_then_read_round_trip(env, json_args, capsys):
    assert run(json_args + ["create", "db", "secret"], capsys)[0] == 0
    code, out, _ = run(json_args + ["read", "db"], capsys)
    assert code == 0
    assert out == "secret\n"


def test_stored_value_is_encrypted(env, json_args, tmp_path, capsys):
    code, _, _ = run(json_args + ["create", "db", "secret"], capsys)
    assert code == 0
    stored = json.loads((tmp_path / "secrets.json").read_text())
    sealed = base64.b64decode(stored["db"])
    assert len(sealed) == 24 + 16 + len(b"secret")
    assert b"secret" not in sealed
    assert decrypt(sealed, load_key_from_env(os.environ)) == b"secret"


def test_list_sorted(env, json_args, capsys):
    for name in ["zeta", "alpha", "mid"]:
        run(json_args + ["add", name, "secret"], capsys)
    code, out, _ = run(json_args + ["list"], capsys)
    assert code == 0
    assert out.splitlines() == ["alpha", "mid", "zeta"]


def test_list_empty(env, json_args, capsys):
    code, out, _ = run(json_args + ["list"], capsys)
    assert code == 0
    assert out == "No secrets found in backend 'jsonfile'.\n"


def test_delete_then_read_not_found(env, json_args, capsys):
    run(json_args + ["create", "db", "secret"], capsys)
    assert run(json_args + ["delete", "db"], capsys)[0] == 0
    code, _, err = run(json_args + ["read", "db"], capsys)
    assert code == 1
    assert "secret with key 'db' not found" in err


def test_delete_missing(env, json_args, capsys):
    code, _, err = run(json_args + ["delete", "nope"], capsys)
    assert code == 1
    assert "secret with key 'nope' not found" in err


def test_create_duplicate_fails(env, json_args, capsys):
    run(json_args + ["create", "db", "secret"], capsys)
    code, _, err = run(json_args + ["create", "db", "secret"], capsys)
    assert code == 1
    assert "failed to create secret in store" in err


def test_create_update(env, json_args, capsys):
    run(json_args + ["create", "db", "secret"], capsys)
    code, out, _ = run(json_args + ["create", "db", "token", "--update"], capsys)
    assert code == 0
    assert out == "Secret 'db' updated successfully using backend 'jsonfile'.\n"
    assert run(json_args + ["read", "db"], capsys)[1] == "token\n"


def test_update_missing_fails(env, json_args, capsys):
    code, _, err = run(json_args + ["create", "db", "secret", "--update"], capsys)
    assert code == 1
    assert "failed to update secret in store" in err


def test_create_empty_value(env, json_args, capsys):
    code, _, err = run(json_args + ["create", "db", ""], capsys)
    assert code == 1
    assert "both key and value arguments are required" in err


def test_generate_stores_password(env, json_args, capsys):
    assert run(json_args + ["generate", "pw", "16", "-u", "-n"], capsys)[0] == 0
    code, out, _ = run(json_args + ["read", "pw"], capsys)
    value = out.rstrip("\n")
    assert code == 0
    assert len(value) == 16
    assert set(value) <= set(UPPERCASE + NUMBERS)


def test_generate_lowercase_update(env, json_args, capsys):
    run(json_args + ["create", "pw", "secret"], capsys)
    assert run(json_args + ["gen", "pw", "10", "-l", "--update"], capsys)[0] == 0
    value = run(json_args + ["read", "pw"], capsys)[1].rstrip("\n")
    assert len(value) == 10
    assert set(value) <= set(LOWERCASE)


def test_generate_requires_charset(env, json_args, capsys):
    code, _, err = run(json_args + ["generate", "pw", "8"], capsys)
    assert code == 1
    assert "at least one of --uppercase, --lowercase, or --numbers must be set" in err


def test_generate_rejects_non_positive_length(env, json_args, capsys):
    code, _, err = run(json_args + ["generate", "pw", "0", "-u"], capsys)
    assert code == 1
    assert "password length must be positive" in err


def test_generate_rejects_bad_length(env, json_args, capsys):
    code, _, err = run(json_args + ["generate", "pw", "many", "-u"], capsys)
    assert code == 1
    assert "invalid length argument" in err


def test_missing_encryption_key(env, json_args, monkeypatch, capsys):
    monkeypatch.delenv(ENV_KEY_NAME)
    code, _, err = run(json_args + ["list"], capsys)
    assert code == 1
    assert ENV_KEY_NAME in err


def test_wrong_key_fails_decryption(env, json_args, monkeypatch, capsys):
    run(json_args + ["create", "db", "secret"], capsys)
    monkeypatch.setenv(ENV_KEY_NAME, generate_key())
    code, _, err = run(json_args + ["read", "db"], capsys)
    assert code == 1
    assert "failed to decrypt value for key 'db'" in err


def test_unknown_backend(env, capsys):
    code, _, err = run(["--backend", "tape", "list"], capsys)
    assert code == 1
    assert "unknown backend type: tape" in err


def test_sqlite_backend_round_trip(env, tmp_path, capsys):
    args = ["--backend", "sqlite", "--sqlite-db", str(tmp_path / "s.db")]
    assert run(args + ["create", "db", "secret"], capsys)[0] == 0
    assert run(args + ["read", "db"], capsys)[1] == "secret\n"
    assert run(args + ["list"], capsys)[1] == "db\n"


def test_config_file_supplies_backend(env, tmp_path, capsys):
    store_path = tmp_path / "from-config.json"
    (env / ".secrets-cli.json").write_text(
        json.dumps({"backend_type": "jsonfile", "json_file_path": str(store_path)})
    )
    assert run(["create", "db", "secret"], capsys)[0] == 0
    assert "db" in json.loads(store_path.read_text())
    assert run(["read", "db"], capsys)[1] == "secret\n"


def test_bad_config_file_raises(env, capsys):
    (env / ".secrets-cli.json").write_text("not json")
    with pytest.raises(StoreError):
        main(["list"])
    assert "error loading config" in capsys.readouterr().out


def test_no_command_prints_help(env, capsys):
    code, out, _ = run([], capsys)
    assert code == 0
    assert "secrets-cli" in out