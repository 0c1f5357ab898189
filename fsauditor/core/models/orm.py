# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""SQLAlchemy ORM models for database schema.

This module defines the database schema for storing imported F# analyzer
findings. Every imported diagnostics document produces one ScanMetadata row
and one FSharpIssueResult row per issue the sink accepted.

Classes
-------
Base : SQLAlchemy declarative base
ResultsBase : Base class for result models
ScanMetadata : One imported diagnostics document
FSharpIssueResult : One accepted F# analyzer issue

Examples
--------
Create a scan and a result row (the row is linked to the scan by
``save_scan_and_rows``):
    >>> from fsauditor.core.models.orm import FSharpIssueResult, ScanMetadata
    >>> scan = ScanMetadata(scan_timestamp='2025-01-01T00:00:00Z', report_path='out.xml')
    >>> result = FSharpIssueResult(
    ...     file_path='src/Program.fs',
    ...     rule_key='SEC001',
    ...     line_number=10,
    ...     message='Hard-coded credentials'
    ... )

See Also
--------
fsauditor.infra.db : Database utilities
fsauditor.application.sink : Produces the rows
"""
from __future__ import annotations

import hashlib
import os

from sqlalchemy import Column, ForeignKey, Integer, String, Text, event
from sqlalchemy.orm import declarative_base, declared_attr, relationship


Base = declarative_base()


class ScanMetadata(Base):
    """
    Metadata for each imported diagnostics document.

    Attributes:
        id: Auto-incrementing primary key
        scan_timestamp: ISO format timestamp of the import
        report_path: Absolute path of the AnalysisOutput document
        root: Base directory the issues were resolved against
        issue_count: Issues parsed from the document
        saved_count: Issues accepted by the sink
        skipped_count: Issues skipped by the sink
        error: Parse error text, when the document could not be read
    """
    __tablename__ = "scan_metadata"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scan_timestamp = Column(String, nullable=False)
    report_path = Column(String, nullable=False, default="")
    root = Column(String, nullable=True, default="")
    issue_count = Column(Integer, nullable=False, default=0)
    saved_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    error = Column(Text, nullable=True)

    fsharp_results = relationship(
        "FSharpIssueResult", back_populates="scan", cascade="all, delete-orphan"
    )


class ResultsBase(Base):
    """
    Abstract base class for result models.

    Provides location fields and a content-hash primary key built from the
    table name, the project root, the file path, the identifying columns and
    the location. Re-importing the same finding yields the same key.

    Attributes:
        pk: SHA-256 hash used as primary key (64 hex characters)
        scan_id: Foreign key to scan_metadata table
        file_path: Path of the file, relative to root when possible
        root: Project root directory
        line_number: Starting line number of the issue
        end_line_number: Ending line number of the issue
        col_offset: Starting column offset
        end_col_offset: Ending column offset
    """
    __abstract__ = True

    pk = Column(String(64), primary_key=True)  # sha256 hex

    @declared_attr
    def scan_id(cls):
        return Column(Integer, ForeignKey("scan_metadata.id"), nullable=False)

    file_path       = Column(String, nullable=True, default="")
    root            = Column(String, nullable=True, default="")
    line_number     = Column(Integer, nullable=True, default=None)
    end_line_number = Column(Integer, nullable=True, default=None)
    col_offset      = Column(Integer, nullable=True, default=None)
    end_col_offset  = Column(Integer, nullable=True, default=None)

    # ---------- PK builder ----------
    def build_pk(self) -> str:
        table = type(self).__tablename__
        root = (self.root or "").replace("\\", "/")
        rel = self.file_path or ""
        try:
            # only relativize absolute paths; otherwise keep original rel path
            if root and os.path.isabs(rel):
                rel = os.path.relpath(rel, root)
        except ValueError:
            pass
        rel = rel.replace("\\", "/")

        parts = [table, root, rel]
        cols = ["repository", "rule_key", "message", "line_number", "end_line_number", "col_offset", "end_col_offset"]
        for attr in cols:
            val = getattr(self, attr, None)
            if val is not None and val != "":
                parts.append(f"{attr}={val}")

        key = "|".join(parts)
        return hashlib.sha256(key.encode("utf-8")).hexdigest()


@event.listens_for(ResultsBase, "before_insert", propagate=True)
def _resultsbase_set_pk_before_insert(mapper, connection, target):
    # Compute PK just-in-time if missing
    if not getattr(target, "pk", None):
        target.pk = target.build_pk()


class FSharpIssueResult(ResultsBase):
    """
    One F# analyzer issue accepted by the reporting sink.

    Attributes:
        repository: Rule repository key (e.g. 'fsharpsecurity')
        rule_key: Analyzer rule identifier
        message: Issue message, verbatim
        absolute_file_path: Path exactly as written by the analyzer
    """
    __tablename__ = "fsharp_results"

    repository = Column(String, nullable=False, default="")
    rule_key = Column(String, nullable=False)
    message = Column(Text, nullable=True)
    absolute_file_path = Column(String, nullable=True)

    scan = relationship("ScanMetadata", back_populates="fsharp_results")


__all__ = ["Base", "ResultsBase", "ScanMetadata", "FSharpIssueResult"]
