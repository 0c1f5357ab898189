"""Findings extraction and export utilities.

This module turns the outcome of an import run, or the issues already stored
in the database, into a JSON document for other tools.

Examples
--------
Export an import run:
    >>> export_reported_issues(summaries, sink.reported, Path("out/issues.json"))
    PosixPath('out/issues.json')

Extract stored findings:
    >>> data = extract_findings_to_json("sqlite:///out/fsauditor.sqlite3", scan_id=3)
    >>> data['name']
    'fsauditor'

See Also
--------
fsauditor.application.importer : Produces the summaries
fsauditor.infra.db.utils : Database utilities
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional, Union

from fsauditor.infra.db.utils import load_issue_rows

from .importer import ImportSummary
from .sink import ReportedIssue


def build_report(
    summaries: Iterable[ImportSummary],
    issues: Iterable[ReportedIssue],
) -> dict:
    """Assemble the export document for one import run.

    Parameters
    ----------
    summaries : Iterable[ImportSummary]
        One summary per imported diagnostics document.
    issues : Iterable[ReportedIssue]
        Issues accepted by the sink, in import order.

    Returns
    -------
    dict
        Dictionary with keys:
        - 'name': str, always 'fsauditor'
        - 'reports': list[dict], the import summaries
        - 'issues': list[dict], the reported issues
    """
    return {
        "name": "fsauditor",
        "reports": [s.model_dump() for s in summaries],
        "issues": [i.model_dump() for i in issues],
    }


def export_reported_issues(
    summaries: Iterable[ImportSummary],
    issues: Iterable[ReportedIssue],
    path: Union[str, Path],
) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fh:
        json.dump(build_report(summaries, issues), fh, indent=2)
    return target


def extract_findings_to_json(database_url: str, *, scan_id: Optional[int] = None) -> dict:
    """Extract stored findings and return them as a JSON-ready structure.

    Parameters
    ----------
    database_url : str
        SQLAlchemy database URL.
    scan_id : int, optional
        If provided, only extract findings from this scan.

    Returns
    -------
    dict
        Dictionary with keys 'name', 'scan_id' and 'findings'.
    """
    findings: List[dict] = load_issue_rows(database_url, scan_id=scan_id)
    return {
        "name": "fsauditor",
        "scan_id": scan_id,
        "findings": findings,
    }


__all__ = ["build_report", "export_reported_issues", "extract_findings_to_json"]
