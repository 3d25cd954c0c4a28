from __future__ import annotations

from pathlib import Path

import sqlalchemy as sa
from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

BACKEND_DIR = Path(__file__).resolve().parents[1]
EXPECTED_TABLES = {"audit_log", "employee", "location", "role", "time_off_request"}


def _alembic_config(db_path: Path) -> Config:
    # No ini file, so env.py leaves logging configuration alone.
    config = Config()
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config


def test_upgrade_and_downgrade(tmp_path: Path) -> None:
    db_path = tmp_path / "migrations.db"
    config = _alembic_config(db_path)

    command.upgrade(config, "head")

    engine = sa.create_engine(f"sqlite:///{db_path}")
    try:
        inspector = sa.inspect(engine)
        assert EXPECTED_TABLES.issubset(set(inspector.get_table_names()))
        employee_columns = {c["name"] for c in inspector.get_columns("employee")}
        assert {"days_available", "hours_available", "balance_version"}.issubset(employee_columns)
        unique_names = {u["name"] for u in inspector.get_unique_constraints("role")}
        assert "uq_role_organization_name" in unique_names
    finally:
        engine.dispose()

    command.downgrade(config, "base")

    engine = sa.create_engine(f"sqlite:///{db_path}")
    try:
        assert EXPECTED_TABLES.isdisjoint(set(sa.inspect(engine).get_table_names()))
    finally:
        engine.dispose()


def test_migration_head_is_initial_revision(tmp_path: Path) -> None:
    script = ScriptDirectory.from_config(_alembic_config(tmp_path / "unused.db"))
    assert script.get_current_head() == "0001_initial"
