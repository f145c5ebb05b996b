"""Configuration constants for keyword-vault."""

import os
from pathlib import Path

# Directory with the vault database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/keyword-vault").expanduser(),
    Path("~/.keyword-vault").expanduser(),
]

# Default location when none of DATA_DIRECTORIES exists yet.
DEFAULT_DATA_DIR: Path = DATA_DIRECTORIES[0]

DB_FILENAME: str = "vault.db"

# Plain-text credential cache. Not a secret store.
CREDENTIAL_FILE: Path = Path("~/.config/keyword-vault/credentials.json").expanduser()

DATA_DIR_ENV: str = "VAULT_DATA_DIR"
MASTERPASS_ENV: str = "VAULT_MASTERPASS"
API_URL_ENV: str = "VAULT_API_URL"

DEFAULT_API_URL: str = "http://localhost:3000"

# Request timeout for the remote vault API, in seconds.
API_TIMEOUT: float = 30.0

IMAGE_EXTENSIONS: frozenset[str] = frozenset({"jpg", "jpeg", "png", "gif", "webp"})

# Marker in the filename of PDFs produced by a merge.
MERGED_PREFIX: str = "merged-"


def resolve_data_directory() -> Path:
    """Return the vault data directory: env override, first existing, or default."""
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return Path(env).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DEFAULT_DATA_DIR


def resolve_master_password() -> str | None:
    return os.environ.get(MASTERPASS_ENV) or None


def resolve_api_url() -> str:
    return os.environ.get(API_URL_ENV, DEFAULT_API_URL).rstrip("/")
