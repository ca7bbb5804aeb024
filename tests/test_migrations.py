"""Tests for the alembic migration chain."""

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from community_platform.scripts.migrate import MIGRATIONS_DIR


def _alembic_config() -> Config:
    # No ini file, so the test run's logging setup is left alone.
    cfg = Config()
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    return cfg


def test_upgrade_and_downgrade_on_sqlite(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)
    cfg = _alembic_config()

    command.upgrade(cfg, "head")
    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        member_columns = {column["name"] for column in inspector.get_columns("community_member")}
        community_columns = {column["name"] for column in inspector.get_columns("community")}
        assert "joined_at" in member_columns
        assert {"logo_uri", "banner_uri"} <= community_columns

        command.downgrade(cfg, "base")
        assert "community" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
