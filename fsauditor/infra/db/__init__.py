"""Database layer for imported findings.

Modules
-------
connection : Engine creation and caching
utils : Sessions, schema creation, inserts and queries
seed : Schema initialization
"""
from __future__ import annotations

from .connection import get_engine
from .seed import seed_database
from .utils import get_session, init_db, load_issue_rows, save_scan_and_rows

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "load_issue_rows",
    "save_scan_and_rows",
    "seed_database",
]
