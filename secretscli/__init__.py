"""Encrypted key-value secret storage with SQLite and JSON file backends and a command-line interface."""

__version__ = "0.1.0"