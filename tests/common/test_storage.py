from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from ogindex.config import storage


def test_storage_config_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("OGINDEX_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.data_dir == custom


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("OGINDEX_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = storage.get_storage_config()

    assert config.data_dir == tmp_path / storage.APP_DIR_NAME


def test_snapshot_database_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    config = storage.get_snapshot_database_config()

    assert config.uri == "sqlite:///override.db"


def test_snapshot_database_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("OGINDEX_DATA_DIR", str(tmp_path / "data-dir"))

    config = storage.get_snapshot_database_config()

    expected_path = (tmp_path / "data-dir" / storage.SNAPSHOT_FILENAME).resolve()
    assert config.uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_http_cache_lives_next_to_snapshot(tmp_path: Path) -> None:
    config = storage.StorageConfig(data_dir=tmp_path)

    assert config.http_cache_path().parent == config.snapshot_path().parent
    assert config.http_cache_path().name == storage.HTTP_CACHE_FILENAME
