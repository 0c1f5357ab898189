"""Tests for the database layer."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect

from fsauditor.application.extractor import extract_findings_to_json
from fsauditor.application.importer import import_report, persist_import
from fsauditor.application.sink import FileIndex, ReportingSink
from fsauditor.core.models.orm import FSharpIssueResult, ScanMetadata
from fsauditor.infra.db import get_engine, get_session, load_issue_rows, save_scan_and_rows, seed_database


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    url = f"sqlite:///{tmp_path / 'db' / 'fsauditor.sqlite3'}"
    seed_database(url)
    return url


def test_seed_creates_tables(database_url: str) -> None:
    tables = set(inspect(get_engine(database_url)).get_table_names())
    assert {"scan_metadata", "fsharp_results"} <= tables


def test_seed_is_idempotent(database_url: str) -> None:
    seed_database(database_url)


def _row(**kwargs) -> FSharpIssueResult:
    values = dict(
        file_path="src/A.fs",
        root="/proj",
        repository="fsharpsecurity",
        rule_key="SEC001",
        message="m",
        absolute_file_path="/proj/src/A.fs",
        line_number=3,
    )
    values.update(kwargs)
    return FSharpIssueResult(**values)


def test_duplicate_rows_are_stored_once(database_url: str) -> None:
    scan_id, inserted = save_scan_and_rows(
        database_url,
        ScanMetadata(scan_timestamp="2026-01-01T00:00:00Z", report_path="a.xml"),
        [_row(), _row(), _row(line_number=4)],
    )
    assert inserted == 2

    _, inserted_again = save_scan_and_rows(
        database_url,
        ScanMetadata(scan_timestamp="2026-01-02T00:00:00Z", report_path="a.xml"),
        [_row(), _row(line_number=5)],
    )
    assert inserted_again == 1

    rows = load_issue_rows(database_url)
    assert [r["line_number"] for r in rows] == [3, 4, 5]
    assert [r["line_number"] for r in load_issue_rows(database_url, scan_id=scan_id)] == [3, 4]


def test_persist_import_and_extract(
    database_url: str, source_tree: Path, program_fs: Path, make_issue, write_report
) -> None:
    report = write_report(
        [
            make_issue(program_fs, start_line=3, start_column=4, end_line=3, end_column=12),
            make_issue("/elsewhere.fs"),
        ]
    )
    sink = ReportingSink(FileIndex.scan(source_tree))
    summary = import_report(report, sink)

    scan_id, inserted = persist_import(database_url, summary, sink)
    assert inserted == 1

    with get_session(database_url) as session:
        scan = session.get(ScanMetadata, scan_id)
        assert (scan.issue_count, scan.saved_count, scan.skipped_count) == (2, 1, 1)
        assert scan.report_path == summary.report_path
        assert scan.error is None

    findings = extract_findings_to_json(database_url, scan_id=scan_id)
    assert findings["scan_id"] == scan_id
    assert findings["findings"] == [
        {
            "scan_id": scan_id,
            "repository": "fsharpsecurity",
            "rule_key": "SEC001",
            "message": "Hard-coded password",
            "file_path": "src/Program.fs",
            "root": str(source_tree.absolute()),
            "line_number": 3,
            "end_line_number": 3,
            "col_offset": 4,
            "end_col_offset": 12,
        }
    ]


def test_failed_import_is_recorded(database_url: str, tmp_path: Path, source_tree: Path) -> None:
    sink = ReportingSink(FileIndex.scan(source_tree))
    summary = import_report(tmp_path / "missing.xml", sink)

    scan_id, inserted = persist_import(database_url, summary, sink)

    assert inserted == 0
    with get_session(database_url) as session:
        assert session.get(ScanMetadata, scan_id).error == summary.error
