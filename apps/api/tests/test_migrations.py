"""
Tests de las migraciones Alembic sobre un fichero SQLite temporal.
"""

from argparse import Namespace
from pathlib import Path

import sqlalchemy as sa
from alembic import command
from alembic.config import Config

API_DIR = Path(__file__).resolve().parent.parent


def alembic_config(db_url: str) -> Config:
    cfg = Config(str(API_DIR / "alembic.ini"), cmd_opts=Namespace(x=[f"db_url={db_url}"]))
    cfg.set_main_option("script_location", str(API_DIR / "alembic"))
    return cfg


def test_upgrade_and_downgrade(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'migrations.db'}"
    cfg = alembic_config(db_url)

    command.upgrade(cfg, "head")

    engine = sa.create_engine(db_url)
    try:
        tables = set(sa.inspect(engine).get_table_names())
        assert {"system_config", "portfolio", "operations", "rotations", "drawdown_events"} <= tables

        with engine.connect() as conn:
            row = conn.execute(sa.text("SELECT paxg_min_percentage, max_drawdown_allowed FROM system_config")).one()
        assert (row[0], row[1]) == (40, 25)

        command.downgrade(cfg, "base")
        assert set(sa.inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
