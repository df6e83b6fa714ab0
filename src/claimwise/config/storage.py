"""Where claimwise keeps its data when no database URI is configured."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "claimwise"
DEFAULT_DB_FILENAME: Final[str] = "claimwise.db"
DATA_DIR_ENV: Final[str] = "CLAIMWISE_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    @property
    def location(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def sqlite_path(self) -> Path:
        """Path of the default SQLite file; creates the data directory."""

        self.location.mkdir(parents=True, exist_ok=True)
        return self.location / DEFAULT_DB_FILENAME


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    explicit = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(explicit) if explicit else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = optional_env_var(DATABASE_URI_ENV)
    if uri is None:
        sqlite_path = (storage or get_storage_config()).sqlite_path()
        uri = f"sqlite+pysqlite:///{sqlite_path}"
    return DatabaseConfig(uri=uri)
