[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "secretscli"
version = "0.1.0"
description = "Command-line store for encrypted key-value secrets with SQLite and JSON file backends"
requires-python = ">=3.10"
dependencies = [
    "pynacl",
]
keywords = ["secrets", "encryption", "secretbox", "cli", "sqlite", "json", "password-generator"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
secrets-cli = "secretscli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["secretscli"]

[tool.pytest.ini_options]
addopts = "-ra"
