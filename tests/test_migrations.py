"""
Tests for the Alembic migrations.

The initial revision must create exactly the tables the models
describe, and downgrading must remove them again.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from fine_ledger.models import Base

ROOT = Path(__file__).resolve().parent.parent


def make_config(connection):
    config = Config()
    config.set_main_option("script_location", str(ROOT / "migrations"))
    config.attributes["connection"] = connection
    return config


def test_upgrade_creates_model_tables():
    engine = create_engine("sqlite://")
    with engine.begin() as connection:
        command.upgrade(make_config(connection), "head")
        tables = set(inspect(connection).get_table_names())

    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables


def test_upgrade_matches_model_columns():
    engine = create_engine("sqlite://")
    with engine.begin() as connection:
        command.upgrade(make_config(connection), "head")
        inspector = inspect(connection)
        for name, table in Base.metadata.tables.items():
            columns = {c["name"] for c in inspector.get_columns(name)}
            assert columns == set(table.columns.keys()), name


def test_downgrade_removes_tables():
    engine = create_engine("sqlite://")
    with engine.begin() as connection:
        config = make_config(connection)
        command.upgrade(config, "head")
        command.downgrade(config, "base")
        tables = set(inspect(connection).get_table_names())

    assert not set(Base.metadata.tables) & tables
