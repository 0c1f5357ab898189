"""Database utility functions.

This module provides helper functions for common database operations including
session management, schema creation and storing imported issues.

Functions
---------
get_session : Get database session context manager
init_db : Create all tables
save_scan_and_rows : Save a scan and its result rows
load_issue_rows : Read stored issue rows back

Examples
--------
>>> with get_session("sqlite:///out/fsauditor.sqlite3") as sess:
...     count = sess.query(FSharpIssueResult).count()

See Also
--------
fsauditor.infra.db.connection : Connection management
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fsauditor.core.exceptions import DatabaseError
from fsauditor.core.models.orm import Base, FSharpIssueResult, ScanMetadata
from fsauditor.core.models.parsers._shared import now_iso

from .connection import get_engine

_SQLITE_BATCH = 500


@contextmanager
def get_session(database_url: str) -> Iterator[Session]:
    factory = sessionmaker(
        bind=get_engine(database_url), autoflush=False, autocommit=False, future=True
    )
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(database_url: str) -> None:
    try:
        Base.metadata.create_all(bind=get_engine(database_url))
    except SQLAlchemyError as exc:
        raise DatabaseError("create_all", str(exc), {"url": database_url}) from exc


def save_scan_and_rows(
    database_url: str,
    scan_row: Optional[ScanMetadata],
    result_rows: Sequence[FSharpIssueResult],
) -> Tuple[int, int]:
    """
    Persist one scan and its rows. Rows whose content-hash key already exists
    (in this batch or in the database) are skipped.

    Returns:
        (scan id, number of rows inserted)
    """
    if scan_row is None:
        scan_row = ScanMetadata(scan_timestamp=now_iso())

    try:
        with get_session(database_url) as session:
            # 1) persist scan to get id
            session.add(scan_row)
            session.flush()
            scan_id = scan_row.id

            # 2) compute pk; dedupe in-memory
            payloads: List[Dict[str, object]] = []
            seen_pks: set[str] = set()
            for row in result_rows:
                if row is None:
                    continue
                row.scan_id = scan_id
                if not getattr(row, "pk", None):
                    row.pk = row.build_pk()
                if row.pk in seen_pks:
                    continue
                seen_pks.add(row.pk)
                payloads.append(
                    {col.name: getattr(row, col.name) for col in FSharpIssueResult.__table__.columns}
                )

            # 3) bulk insert, ignoring keys stored by earlier imports
            inserted = 0
            if payloads:
                if session.bind.dialect.name == "sqlite":
                    # stay under SQLite's bound-parameter limit
                    for start in range(0, len(payloads), _SQLITE_BATCH):
                        stmt = (
                            sqlite_insert(FSharpIssueResult)
                            .values(payloads[start:start + _SQLITE_BATCH])
                            .on_conflict_do_nothing(index_elements=["pk"])
                        )
                        inserted += session.execute(stmt).rowcount or 0
                else:
                    existing = set(
                        session.scalars(
                            select(FSharpIssueResult.pk).where(FSharpIssueResult.pk.in_(seen_pks))
                        )
                    )
                    fresh = [p for p in payloads if p["pk"] not in existing]
                    if fresh:
                        session.execute(FSharpIssueResult.__table__.insert(), fresh)
                    inserted = len(fresh)
            return scan_id, inserted
    except SQLAlchemyError as exc:
        raise DatabaseError("insert", str(exc), {"url": database_url}) from exc


def load_issue_rows(database_url: str, scan_id: Optional[int] = None) -> List[Dict[str, object]]:
    """Return stored issue rows as dicts, optionally limited to one scan."""
    stmt = select(FSharpIssueResult).order_by(
        FSharpIssueResult.scan_id, FSharpIssueResult.file_path, FSharpIssueResult.line_number
    )
    if scan_id is not None:
        stmt = stmt.where(FSharpIssueResult.scan_id == scan_id)
    try:
        with get_session(database_url) as session:
            return [
                {
                    "scan_id": row.scan_id,
                    "repository": row.repository,
                    "rule_key": row.rule_key,
                    "message": row.message,
                    "file_path": row.file_path,
                    "root": row.root,
                    "line_number": row.line_number,
                    "end_line_number": row.end_line_number,
                    "col_offset": row.col_offset,
                    "end_col_offset": row.end_col_offset,
                }
                for row in session.scalars(stmt)
            ]
    except SQLAlchemyError as exc:
        raise DatabaseError("query", str(exc), {"url": database_url}) from exc


__all__ = ["get_session", "init_db", "save_scan_and_rows", "load_issue_rows"]
