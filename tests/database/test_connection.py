import logging

from quickcart.config.settings import Settings
from quickcart.database import connection


def sqlite_settings() -> Settings:
    overrides = Settings()
    overrides.DATABASE_URL = "sqlite+aiosqlite:///:memory:"
    return overrides


def test_debug_log_level_echoes_sql(monkeypatch):
    monkeypatch.setattr(connection, "LOG_LEVEL", logging.DEBUG)

    engine = connection.create_engine(sqlite_settings())

    assert engine.sync_engine.echo is True


def test_info_log_level_keeps_sql_quiet(monkeypatch):
    monkeypatch.setattr(connection, "LOG_LEVEL", logging.INFO)

    engine = connection.create_engine(sqlite_settings())

    assert not engine.sync_engine.echo
