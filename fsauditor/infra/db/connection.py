"""Database connection management.

This module handles engine creation and caching. One engine is created per
database URL and reused for the lifetime of the process.

Functions
---------
get_engine : Get SQLAlchemy engine for a database URL

Examples
--------
>>> engine = get_engine("sqlite:///out/fsauditor.sqlite3")

See Also
--------
fsauditor.infra.db.utils : Session helpers
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=8)
def get_engine(database_url: str, echo: bool = False) -> Engine:
    _ensure_sqlite_dir(database_url)
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=echo,
        future=True,
    )
    return engine


__all__ = ["get_engine"]
