"""Local data directory and database location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "runboard"
DEFAULT_DB_FILENAME: Final[str] = "runboard.db"
SQLITE_DRIVER: Final[str] = "sqlite+aiosqlite"

# os.name -> (environment variable, fallback below the home directory)
_DATA_HOMES: Final[dict[str, tuple[str, tuple[str, ...]]]] = {
    "nt": ("LOCALAPPDATA", ("AppData", "Local")),
    "posix": ("XDG_DATA_HOME", (".local", "share")),
}

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def root(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_file(self) -> Path:
        """Path of the SQLite file; creates the data directory on first use."""

        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False

    @classmethod
    def sqlite(cls, storage: StorageConfig, *, echo: bool = False) -> DatabaseConfig:
        return cls(uri=f"{SQLITE_DRIVER}:///{storage.database_file()}", echo=echo)


def _platform_data_home() -> Path:
    env_name, fallback = _DATA_HOMES.get(os.name, _DATA_HOMES["posix"])
    configured = optional_env_var(env_name)
    return Path(configured) if configured else Path.home().joinpath(*fallback)


def get_storage_config() -> StorageConfig:
    configured = optional_env_var("RUNBOARD_DATA_DIR")
    if configured:
        return StorageConfig(data_dir=Path(configured))
    return StorageConfig(data_dir=_platform_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    echo = (optional_env_var("DATABASE_ECHO") or "").lower() in _TRUTHY
    uri = optional_env_var("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri, echo=echo)
    return DatabaseConfig.sqlite(storage or get_storage_config(), echo=echo)
