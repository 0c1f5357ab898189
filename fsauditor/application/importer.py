"""Import of analyzer diagnostics documents.

The analyzer is run in a work directory where it reads
``sonarAnalysisConfig.xml`` and writes its findings to
``sonarDiagnostics.xml``. Importing one such document means parsing it and
handing each issue to a sink. A document that cannot be parsed is reported
once, verbatim, and contributes no issues; it never aborts a batch.

Functions
---------
diagnostics_path : Location of the diagnostics document in a work dir
analysis_config_path : Location of the analyzer configuration in a work dir
import_report : Parse one document and feed a sink
persist_import : Store one import and its reported issues in the database

Examples
--------
>>> sink = ReportingSink(FileIndex.scan("src"))
>>> summary = import_report(diagnostics_path("work"), sink)
>>> summary.issues_parsed, summary.saved, summary.skipped
(3, 3, 0)
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field

from fsauditor.core.logging_config import get_logger
from fsauditor.core.models.orm import ScanMetadata
from fsauditor.core.models.parsers import parse_analysis_output
from fsauditor.core.models.parsers._shared import now_iso
from fsauditor.infra.db.utils import save_scan_and_rows

from .sink import IssueSink, ReportingSink

logger = get_logger(__name__)

DIAGNOSTICS_FILE = "sonarDiagnostics.xml"
ANALYSIS_CONFIG_FILE = "sonarAnalysisConfig.xml"


def diagnostics_path(work_dir: Union[str, Path], file_name: str = DIAGNOSTICS_FILE) -> Path:
    return Path(work_dir) / file_name


def analysis_config_path(work_dir: Union[str, Path], file_name: str = ANALYSIS_CONFIG_FILE) -> Path:
    return Path(work_dir) / file_name


class ImportSummary(BaseModel):
    """Outcome of importing one diagnostics document."""

    report_path: str
    issues_parsed: int = 0
    saved: int = 0
    skipped: int = 0
    error: Optional[str] = None
    error_kind: Optional[str] = None
    timestamp: str = Field(default_factory=now_iso)

    @property
    def ok(self) -> bool:
        return self.error is None


def import_report(
    report_path: Union[str, Path],
    sink: IssueSink,
    *,
    chunk_size: Optional[int] = None,
) -> ImportSummary:
    """
    Parse ``report_path`` and pass every issue to ``sink`` in document order.

    Parse failures are logged at ERROR with the parser's message and returned
    in the summary; the sink then receives nothing.
    """
    path = str(Path(report_path).absolute())
    result = parse_analysis_output(path, chunk_size=chunk_size)
    if not result.ok:
        logger.error(str(result.error))
        return ImportSummary(
            report_path=path, error=str(result.error), error_kind=result.kind.value
        )

    report = sink.save_all(result.issues)
    logger.info(
        "Imported %s: %d issues, %d saved, %d skipped",
        path,
        len(result.issues),
        report.saved,
        report.skipped,
    )
    return ImportSummary(
        report_path=path,
        issues_parsed=len(result.issues),
        saved=report.saved,
        skipped=report.skipped,
    )


def persist_import(
    database_url: str,
    summary: ImportSummary,
    sink: ReportingSink,
) -> Tuple[int, int]:
    """
    Store one import run: a ScanMetadata row plus the sink's reported issues.

    Returns:
        (scan id, number of issue rows inserted)
    """
    scan = ScanMetadata(
        scan_timestamp=summary.timestamp,
        report_path=summary.report_path,
        root=sink.index.base_dir or "",
        issue_count=summary.issues_parsed,
        saved_count=summary.saved,
        skipped_count=summary.skipped,
        error=summary.error,
    )
    scan_id, inserted = save_scan_and_rows(database_url, scan, sink.to_rows())
    logger.debug("Stored scan %d with %d new issue rows", scan_id, inserted)
    return scan_id, inserted


__all__ = [
    "ANALYSIS_CONFIG_FILE",
    "DIAGNOSTICS_FILE",
    "ImportSummary",
    "analysis_config_path",
    "diagnostics_path",
    "import_report",
    "persist_import",
]
