"""Tests for import orchestration and JSON export."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from fsauditor.application.extractor import build_report, export_reported_issues
from fsauditor.application.importer import (
    ANALYSIS_CONFIG_FILE,
    DIAGNOSTICS_FILE,
    analysis_config_path,
    diagnostics_path,
    import_report,
)
from fsauditor.application.sink import FileIndex, ReportingSink


def test_work_dir_paths(tmp_path: Path) -> None:
    assert diagnostics_path(tmp_path) == tmp_path / DIAGNOSTICS_FILE
    assert analysis_config_path(tmp_path) == tmp_path / ANALYSIS_CONFIG_FILE
    assert diagnostics_path(tmp_path, "other.xml").name == "other.xml"
    assert DIAGNOSTICS_FILE == "sonarDiagnostics.xml"
    assert ANALYSIS_CONFIG_FILE == "sonarAnalysisConfig.xml"


def test_import_report_feeds_the_sink(source_tree: Path, program_fs: Path, make_issue, write_report) -> None:
    report = write_report(
        [
            make_issue(program_fs, start_line=3),
            make_issue(program_fs, rule_key="SEC002"),
            make_issue("/not/in/tree.fs", start_line=1),
        ]
    )
    sink = ReportingSink(FileIndex.scan(source_tree))

    summary = import_report(report, sink)

    assert summary.ok
    assert summary.report_path == str(report.absolute())
    assert (summary.issues_parsed, summary.saved, summary.skipped) == (3, 2, 1)
    assert [r.rule_key for r in sink.reported] == ["SEC001", "SEC002"]


def test_import_report_failure_is_logged_verbatim(
    tmp_path: Path, source_tree: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="fsauditor")
    report = tmp_path / DIAGNOSTICS_FILE
    report.write_text("<AnalysisOutput><Issues><Issue><RuleKey>R</RuleKey>", encoding="utf-8")
    sink = ReportingSink(FileIndex.scan(source_tree))

    summary = import_report(report, sink)

    assert not summary.ok
    assert summary.issues_parsed == 0
    assert summary.error_kind == "premature_end"
    assert sink.reported == []
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert [r.getMessage() for r in errors] == [summary.error]
    assert str(report) in summary.error


def test_import_missing_report(tmp_path: Path, source_tree: Path) -> None:
    summary = import_report(tmp_path / "nothing.xml", ReportingSink(FileIndex.scan(source_tree)))
    assert summary.error_kind == "stream_failure"


def test_export_reported_issues(tmp_path: Path, source_tree: Path, program_fs: Path, make_issue, write_report) -> None:
    report = write_report([make_issue(program_fs, start_line=3, start_column=4, end_line=3, end_column=12)])
    sink = ReportingSink(FileIndex.scan(source_tree))
    summary = import_report(report, sink)

    target = export_reported_issues([summary], sink.reported, tmp_path / "out" / "issues.json")
    data = json.loads(target.read_text(encoding="utf-8"))

    assert data == build_report([summary], sink.reported)
    assert data["name"] == "fsauditor"
    assert data["reports"][0]["saved"] == 1
    assert data["issues"][0]["file_path"] == "src/Program.fs"
    assert data["issues"][0]["text_range"] == {
        "start_line": 3, "start_column": 4, "end_line": 3, "end_column": 12,
    }
