"""Reusable migration runner for both production and tests."""

from pathlib import Path

from alembic.config import Config

from alembic import command

ALEMBIC_INI = Path(__file__).resolve().parents[3] / "alembic.ini"


def run_migrations_sync(database_url: str | None = None) -> None:
    """Run Alembic migrations synchronously.

    Args:
        database_url: Optional URL override (async or sync driver). When None,
            the URL comes from settings inside ``src/alembic/env.py``.
    """
    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_INI.parent / "src" / "alembic"))
    if database_url is not None:
        alembic_cfg.attributes["database_url"] = database_url
    command.upgrade(alembic_cfg, "head")
