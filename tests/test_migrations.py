from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from storefront.database import Base

ROOT = Path(__file__).resolve().parent.parent


def _alembic_config(url: str) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_creates_every_model_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    command.upgrade(_alembic_config(url), "head")

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert {"products", "users", "cart_items", "orders"} <= tables
        assert set(Base.metadata.tables) <= tables

        order_columns = {c["name"] for c in inspect(engine).get_columns("orders")}
        assert set(Base.metadata.tables["orders"].columns.keys()) == order_columns
    finally:
        engine.dispose()


def test_downgrade_drops_the_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = _alembic_config(url)
    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
