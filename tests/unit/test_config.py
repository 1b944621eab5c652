from __future__ import annotations

import pytest
from pydantic import ValidationError

from record_engine.config import Settings, get_settings
from record_engine.infrastructure.db_factory import build_dsn, create_record_store
from record_engine.infrastructure.memory_store import InMemoryRecordStore
from record_engine.infrastructure.postgres_store import PostgresRecordStore


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("LOG_JSON", "true")

    settings = get_settings()

    assert settings.db_host == "db.internal"
    assert settings.db_port == 6543
    assert settings.store_backend == "memory"
    assert settings.log_json is True
    assert get_settings() is settings


def test_dsn_is_composed_from_parts() -> None:
    settings = Settings(db_user="crm", db_password="secret", db_host="h", db_port=1, db_name="n")

    assert settings.dsn == "postgresql://crm:secret@h:1/n"
    assert build_dsn(settings) == settings.dsn


def test_display_defaults() -> None:
    settings = Settings()

    assert settings.currency_symbol == "$"
    assert settings.currency_decimals == 2
    assert settings.display_placeholder == "—"


def test_store_factory_selects_backend() -> None:
    assert isinstance(create_record_store(Settings(store_backend="memory")), InMemoryRecordStore)
    assert isinstance(
        create_record_store(Settings(store_backend="postgres")), PostgresRecordStore
    )
    with pytest.raises(ValueError, match="Unknown store backend"):
        create_record_store(Settings(store_backend="redis"))


@pytest.mark.parametrize("pattern", ["{weekday}/{year}", "{0}-{1}", "{year"])
def test_unknown_date_placeholders_are_rejected(pattern: str) -> None:
    with pytest.raises(ValidationError, match="DATE_FORMAT"):
        Settings(date_format=pattern)


def test_known_date_placeholders_are_accepted() -> None:
    assert Settings(date_format="{dd}.{mm}.{year}").date_format == "{dd}.{mm}.{year}"
