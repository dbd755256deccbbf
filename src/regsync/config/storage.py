"""Database location settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "regsync"
DEFAULT_DB_FILENAME: Final[str] = "regsync.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def resolve_data_dir() -> Path:
    """``REGSYNC_DATA_DIR`` if set, else the platform's per-user data directory."""
    env_dir = os.getenv("REGSYNC_DATA_DIR")
    if env_dir and env_dir.strip():
        return Path(env_dir.strip()).expanduser().resolve()
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_database_config(*, data_dir: Path | None = None) -> DatabaseConfig:
    """Use ``DATABASE_URI`` verbatim, or a SQLite file in the data directory.

    The data directory is created when the SQLite default is chosen.
    """
    env_uri = os.getenv("DATABASE_URI")
    if env_uri and env_uri.strip():
        return DatabaseConfig(uri=env_uri.strip())
    directory = data_dir.expanduser().resolve() if data_dir is not None else resolve_data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{directory / DEFAULT_DB_FILENAME}")
