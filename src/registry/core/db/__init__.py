"""Database utilities - engine, session, migrations."""

from src.registry.core.db.engine import dispose_engine, get_engine, to_sync_url
from src.registry.core.db.session import get_session
from src.registry.core.migrations import run_migrations_sync

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    "to_sync_url",
    # Session
    "get_session",
    # Migrations
    "run_migrations_sync",
]
