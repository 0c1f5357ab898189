"""Database schema initialization.

Functions
---------
seed_database : Initialize database schema

Examples
--------
>>> seed_database("sqlite:///out/fsauditor.sqlite3")

See Also
--------
fsauditor.core.models.orm : ORM models
"""
from __future__ import annotations

from sqlalchemy import text

from .connection import get_engine
from .utils import init_db


def seed_database(database_url: str) -> None:
    engine = get_engine(database_url)
    if engine.dialect.name == "sqlite":
        with engine.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.execute(text("PRAGMA synchronous = NORMAL"))
            conn.commit()
    init_db(database_url)


__all__ = ["seed_database"]
