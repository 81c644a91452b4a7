"""Where the registry keeps its files.

Everything lives under one data directory: the snapshot database written at
suspension and, when the sqlite HTTP cache backend is chosen, the cache file.
``OGINDEX_DATA_DIR`` overrides the platform default and ``DATABASE_URI`` points
the snapshot at any SQLAlchemy database instead of the local file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "ogindex"
SNAPSHOT_FILENAME: Final[str] = "registry-snapshot.db"
HTTP_CACHE_FILENAME: Final[str] = "metadata-cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def ensure_data_dir(self) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def snapshot_path(self) -> Path:
        return self.ensure_data_dir() / SNAPSHOT_FILENAME

    def http_cache_path(self) -> Path:
        return self.ensure_data_dir() / HTTP_CACHE_FILENAME


@dataclass(frozen=True, slots=True)
class SnapshotDatabaseConfig:
    uri: str


def _platform_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) / APP_DIR_NAME if base else Path.home() / "AppData" / "Local" / APP_DIR_NAME
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) / APP_DIR_NAME if base else Path.home() / ".local" / "share" / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("OGINDEX_DATA_DIR")
    return StorageConfig(data_dir=Path(env_dir) if env_dir else _platform_data_dir())


def get_snapshot_database_config(*, storage: StorageConfig | None = None) -> SnapshotDatabaseConfig:
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return SnapshotDatabaseConfig(uri=env_uri)
    snapshot_path = (storage or get_storage_config()).snapshot_path()
    return SnapshotDatabaseConfig(uri=f"sqlite+pysqlite:///{snapshot_path}")
