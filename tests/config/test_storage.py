from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from claimwise.config import storage


def test_storage_config_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("CLAIMWISE_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.location == custom.resolve()


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("CLAIMWISE_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = storage.get_storage_config()

    assert config.location == (tmp_path / storage.APP_DIR_NAME).resolve()


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://localhost/claimwise")

    assert storage.get_database_config().uri == "postgresql+psycopg://localhost/claimwise"


def test_blank_database_uri_falls_back_to_sqlite_file(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("DATABASE_URI", "  ")
    monkeypatch.setenv("CLAIMWISE_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_config().uri

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()
