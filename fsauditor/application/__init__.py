"""Application layer: file discovery, issue sink, import and export."""
from __future__ import annotations

from .extractor import build_report, export_reported_issues, extract_findings_to_json
from .file import DEFAULT_SUFFIXES, discover_files
from .importer import (
    ANALYSIS_CONFIG_FILE,
    DIAGNOSTICS_FILE,
    ImportSummary,
    analysis_config_path,
    diagnostics_path,
    import_report,
    persist_import,
)
from .sink import (
    FileIndex,
    IssueSink,
    ReportedIssue,
    ReportingSink,
    SinkReport,
    SourceFile,
    TextRange,
    to_text_range,
)

__all__ = [
    "ANALYSIS_CONFIG_FILE",
    "DEFAULT_SUFFIXES",
    "DIAGNOSTICS_FILE",
    "FileIndex",
    "ImportSummary",
    "IssueSink",
    "ReportedIssue",
    "ReportingSink",
    "SinkReport",
    "SourceFile",
    "TextRange",
    "analysis_config_path",
    "build_report",
    "diagnostics_path",
    "discover_files",
    "export_reported_issues",
    "extract_findings_to_json",
    "import_report",
    "persist_import",
    "to_text_range",
]
