"""fsauditor CLI - Command Line Interface.

This module provides the command-line interface for fsauditor. It imports the
diagnostics written by the external F# security analyzer, attaches them to the
project's source files, stores them in a database and exports them as JSON.

Synopsis
--------
import
    Import one or more diagnostics documents
parse
    Print the issues of one document as JSON lines
write-config
    Write the analyzer's AnalysisInput document
seed-db
    Initialize the database schema
export
    Export stored issues to JSON

Options
-------
import command options:
    --base-dir, -b
        Root of the F# sources the issues are resolved against
    --config, -c
        YAML or TOML configuration file
    --json-out
        Write the reported issues to this JSON file
    --db/--no-db
        Store the run in the database (default: from configuration)
    --database-url
        SQLAlchemy database URL
    --debug
        Enable debug logging

Examples
--------
Import the analyzer output of a work directory:
    $ python -m fsauditor import work/sonarDiagnostics.xml --base-dir src

Check a document without storing anything:
    $ python -m fsauditor parse work/sonarDiagnostics.xml

Write the analyzer configuration:
    $ python -m fsauditor write-config --rule SEC001 --files-dir src -o work/sonarAnalysisConfig.xml

Notes
-----
Progress bars are displayed using tqdm when importing several documents.

See Also
--------
fsauditor.application.importer : Import orchestration
fsauditor.infra.db.seed : Database initialization

Author: Anush Krishna
License: MIT
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from tqdm import tqdm

from fsauditor.application.extractor import export_reported_issues, extract_findings_to_json
from fsauditor.application.file import discover_files
from fsauditor.application.importer import (
    ImportSummary,
    analysis_config_path,
    diagnostics_path,
    import_report,
    persist_import,
)
from fsauditor.application.sink import FileIndex, ReportedIssue, ReportingSink
from fsauditor.config import Config, load_config
from fsauditor.core.exceptions import ConfigurationError, DatabaseError
from fsauditor.core.logging_config import setup_logging
from fsauditor.core.models.parsers import parse_analysis_output
from fsauditor.infra.db.seed import seed_database
from fsauditor.infra.documents import parse_rule_spec, write_analysis_input


app = typer.Typer(
    help="fsauditor CLI - Import F# security analyzer diagnostics",
    add_completion=False,
)


def _load_settings(config_file: Optional[Path], args: Dict[str, Any]) -> Config:
    """Load configuration, turning a ConfigurationError into exit code 2."""
    try:
        return load_config(config_file=config_file, args=args)
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


def _configure_logging(config: Config) -> None:
    log_file = Path(config.logging.file)
    setup_logging(
        log_level=config.logging.level,
        log_file=log_file.name,
        log_dir=str(log_file.parent),
        console_output=config.logging.console,
        file_output=config.logging.file_output,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
    )


@app.command("import")
def import_reports(
    reports: Optional[List[Path]] = typer.Argument(
        None, help="Diagnostics documents (default: <work_dir>/<diagnostics_file>)"
    ),
    base_dir: Optional[Path] = typer.Option(
        None, "--base-dir", "-b", help="Root of the F# sources"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or TOML configuration file"
    ),
    json_out: Optional[Path] = typer.Option(
        None, "--json-out", help="Write reported issues to this JSON file"
    ),
    db: Optional[bool] = typer.Option(
        None, "--db/--no-db", help="Store the import in the database"
    ),
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="SQLAlchemy database URL"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Import analyzer diagnostics documents.

    Each document is parsed and its issues are resolved against the source
    files under the base directory. Issues outside the file set, or with a
    location that does not fit the file, are skipped and logged. A document
    that cannot be parsed is reported and contributes no issues; the other
    documents are still imported.

    Raises
    ------
    typer.Exit
        With code 1 if any document failed to parse or the database could
        not be written, code 2 on invalid configuration.

    Examples
    --------
        $ python -m fsauditor import work/sonarDiagnostics.xml -b src --json-out out/issues.json
        work/sonarDiagnostics.xml: 3 issues, 3 saved, 0 skipped
    """
    config = _load_settings(
        config_file,
        {
            "base_dir": str(base_dir) if base_dir else None,
            "database_url": database_url,
            "db_enabled": db,
            "log_level": "DEBUG" if debug else None,
        },
    )
    _configure_logging(config)

    if not reports:
        reports = [diagnostics_path(config.project.work_dir, config.analysis.diagnostics_file)]

    index = FileIndex.scan(
        config.project.base_dir,
        config.analysis.file_suffixes,
        config.project.exclude_patterns,
    )

    use_db = config.database.enabled
    if use_db:
        try:
            seed_database(config.database.url)
        except DatabaseError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(code=1)

    summaries: List[ImportSummary] = []
    reported: List[ReportedIssue] = []
    db_failed = False

    for report in tqdm(reports, desc="Importing", unit="report", disable=len(reports) < 2):
        sink = ReportingSink(index, config.analysis.repository_key)
        summary = import_report(report, sink, chunk_size=config.analysis.chunk_size)
        summaries.append(summary)
        reported.extend(sink.reported)

        if use_db:
            try:
                persist_import(config.database.url, summary, sink)
            except DatabaseError as e:
                typer.echo(str(e), err=True)
                db_failed = True

        if summary.ok:
            typer.echo(
                f"{summary.report_path}: {summary.issues_parsed} issues, "
                f"{summary.saved} saved, {summary.skipped} skipped"
            )
        else:
            typer.echo(f"{summary.report_path}: {summary.error}", err=True)

    if json_out:
        export_reported_issues(summaries, reported, json_out)
        typer.echo(f"Wrote {len(reported)} issues to {json_out}")

    if db_failed or any(not s.ok for s in summaries):
        raise typer.Exit(code=1)


@app.command("parse")
def parse_report(
    report: Path = typer.Argument(..., help="Diagnostics document"),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", min=1, help="Bytes read per chunk"
    ),
) -> None:
    """Print the issues of one document as JSON lines.

    Nothing is resolved against source files and nothing is stored. On a
    malformed document the parser's message is printed and the exit code
    is 1.
    """
    result = parse_analysis_output(report, chunk_size=chunk_size)
    if not result.ok:
        typer.echo(str(result.error), err=True)
        raise typer.Exit(code=1)
    for issue in result.issues:
        typer.echo(issue.model_dump_json())


@app.command("write-config")
def write_config(
    rules: List[str] = typer.Option(
        ..., "--rule", "-r", help="Active rule as KEY or KEY:name=value,..."
    ),
    files_dir: Path = typer.Option(
        ..., "--files-dir", "-f", help="Directory holding the F# files to analyze"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Target file (default: <work_dir>/<analysis_config_file>)"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or TOML configuration file"
    ),
) -> None:
    """Write the AnalysisInput document the analyzer is started with.

    Examples
    --------
        $ python -m fsauditor write-config -r SEC001 -r "SEC002:maxDepth=3" -f src
        Wrote 2 rules and 14 files to ./sonarAnalysisConfig.xml
    """
    config = _load_settings(config_file, {})

    try:
        active = [parse_rule_spec(spec) for spec in rules]
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    if not files_dir.is_dir():
        typer.echo(f"Files directory does not exist: {files_dir}", err=True)
        raise typer.Exit(code=1)

    files = discover_files(files_dir, config.analysis.file_suffixes, config.project.exclude_patterns)
    target = output or analysis_config_path(
        config.project.work_dir, config.analysis.analysis_config_file
    )
    write_analysis_input(active, files, target)
    typer.echo(f"Wrote {len(active)} rules and {len(files)} files to {target}")


@app.command("seed-db")
def seed_db(
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="SQLAlchemy database URL"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or TOML configuration file"
    ),
) -> None:
    """Initialize the database schema.

    This command is idempotent - it's safe to run multiple times.
    """
    config = _load_settings(config_file, {"database_url": database_url})
    try:
        seed_database(config.database.url)
    except DatabaseError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo("Database seeded successfully.")


@app.command("export")
def export_findings(
    output: Path = typer.Option(..., "--output", "-o", help="Path to write the findings JSON"),
    scan_id: Optional[int] = typer.Option(None, "--scan-id", help="Only export this scan"),
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="SQLAlchemy database URL"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or TOML configuration file"
    ),
) -> None:
    """Export stored issues from the database to JSON."""
    config = _load_settings(config_file, {"database_url": database_url})
    try:
        seed_database(config.database.url)
        findings = extract_findings_to_json(config.database.url, scan_id=scan_id)
    except DatabaseError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(findings, f, ensure_ascii=False, indent=2)
    typer.echo(f"Extracted {len(findings['findings'])} findings to {output}")


if __name__ == "__main__":
    app()
