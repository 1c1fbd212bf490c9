"""Storage backends for encrypted secrets: the store interface, SQLite, JSON file and backend configuration."""

__all__ = ["base", "sqlite", "jsonfile", "config"]