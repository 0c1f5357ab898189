"""Issue sink: attaches parsed issues to known source files.

The parser hands over issues carrying the analyzer's absolute file path and
up to four optional positions. The sink resolves the path against the set
of files being analyzed, turns the positions into a ``TextRange`` and keeps
the result as a ``ReportedIssue``. Issues it cannot place are logged and
skipped; they never fail the import.

Range translation
-----------------
- no start line: whole-file issue (``text_range`` is None)
- start line but a missing column: the whole lines from start to end line
- all four positions: the exact range, validated against the file contents

A missing end line defaults to the start line.

Classes
-------
TextRange : Validated location inside a file
SourceFile : A known file with lazily loaded line lengths
FileIndex : The known file set, keyed by absolute path
IssueSink : Abstract consumer of issues
ReportingSink : Sink collecting ReportedIssue records

Examples
--------
>>> index = FileIndex.scan(Path("src"))
>>> sink = ReportingSink(index)
>>> report = sink.save_all(issues)
>>> report.saved, report.skipped
(12, 1)
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from fsauditor.core.logging_config import get_logger
from fsauditor.core.models.orm import FSharpIssueResult
from fsauditor.core.models.parsers._shared import normalize_path, relativize_path
from fsauditor.core.models.parsers.common import Issue

from .file import DEFAULT_SUFFIXES, discover_files

logger = get_logger(__name__)

DEFAULT_REPOSITORY = "fsharpsecurity"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class TextRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_line: int
    start_column: int
    end_line: int
    end_column: int


class SourceFile:
    """A file from the analyzed set. Line lengths are read on first use."""

    def __init__(self, path: Union[str, Path], relative_path: Optional[str] = None) -> None:
        self.path = Path(path)
        self.relative_path = relative_path or self.path.as_posix()
        self._line_lengths: Optional[List[int]] = None

    def line_lengths(self) -> List[int]:
        if self._line_lengths is None:
            text = self.path.read_bytes().decode("utf-8", errors="replace")
            self._line_lengths = [len(line) for line in _LINE_BREAK.split(text)]
        return self._line_lengths

    def line_count(self) -> int:
        return len(self.line_lengths())

    def _check_line(self, line: int) -> int:
        lengths = self.line_lengths()
        if not 1 <= line <= len(lengths):
            raise ValueError(f"line {line} is out of range (1..{len(lengths)})")
        return lengths[line - 1]

    def new_range(self, start_line: int, start_column: int, end_line: int, end_column: int) -> TextRange:
        """Build an exact range; raises ValueError when it does not fit the file."""
        start_len = self._check_line(start_line)
        end_len = self._check_line(end_line)
        if not 0 <= start_column <= start_len:
            raise ValueError(f"column {start_column} is out of range on line {start_line}")
        if not 0 <= end_column <= end_len:
            raise ValueError(f"column {end_column} is out of range on line {end_line}")
        if (end_line, end_column) <= (start_line, start_column):
            raise ValueError(
                f"start {start_line}:{start_column} is not before end {end_line}:{end_column}"
            )
        return TextRange(
            start_line=start_line, start_column=start_column, end_line=end_line, end_column=end_column
        )

    def whole_lines(self, start_line: int, end_line: int) -> TextRange:
        self._check_line(start_line)
        end_len = self._check_line(end_line)
        if end_line < start_line:
            raise ValueError(f"end line {end_line} is before start line {start_line}")
        return TextRange(start_line=start_line, start_column=0, end_line=end_line, end_column=end_len)


class FileIndex:
    """Known file set, looked up by normalized absolute path."""

    def __init__(self, files: Iterable[Union[str, Path]], base_dir: Optional[Union[str, Path]] = None) -> None:
        self.base_dir = str(Path(base_dir).absolute()) if base_dir else None
        self._files: Dict[str, SourceFile] = {}
        for f in files:
            key = normalize_path(f)
            rel = relativize_path(str(Path(f).absolute()), self.base_dir)
            self._files[key] = SourceFile(Path(f).absolute(), rel)

    @classmethod
    def scan(
        cls,
        base_dir: Union[str, Path],
        suffixes: Iterable[str] = DEFAULT_SUFFIXES,
        exclude_patterns: Optional[Iterable[str]] = None,
    ) -> "FileIndex":
        files = discover_files(Path(base_dir), suffixes, exclude_patterns)
        logger.debug("Indexed %d source files under %s", len(files), base_dir)
        return cls(files, base_dir=base_dir)

    def lookup(self, path: str) -> Optional[SourceFile]:
        if not path:
            return None
        return self._files.get(normalize_path(path))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.lookup(path) is not None

    def __len__(self) -> int:
        return len(self._files)


class ReportedIssue(BaseModel):
    """An issue placed on a known file."""

    model_config = ConfigDict(frozen=True)

    repository: str
    rule_key: str
    message: str
    absolute_file_path: str
    file_path: str
    text_range: Optional[TextRange] = None


@dataclass(frozen=True)
class SinkReport:
    saved: int = 0
    skipped: int = 0


def to_text_range(issue: Issue, source: SourceFile) -> Optional[TextRange]:
    """Translate the optional positions of ``issue`` into a range on ``source``."""
    if issue.start_line is None:
        return None
    end_line = issue.end_line if issue.end_line is not None else issue.start_line
    if issue.start_column is None or issue.end_column is None:
        return source.whole_lines(issue.start_line, end_line)
    return source.new_range(issue.start_line, issue.start_column, end_line, issue.end_column)


class IssueSink(ABC):
    """Consumer of parsed issues, in document order."""

    @abstractmethod
    def save(self, issue: Issue) -> bool:
        """Store one issue. Returns False when the issue was skipped."""
        raise NotImplementedError

    def save_all(self, issues: Iterable[Issue]) -> SinkReport:
        saved = skipped = 0
        for issue in issues:
            if self.save(issue):
                saved += 1
            else:
                skipped += 1
        return SinkReport(saved=saved, skipped=skipped)


class ReportingSink(IssueSink):
    """Sink that keeps every placed issue as a ``ReportedIssue``."""

    def __init__(self, index: FileIndex, repository: str = DEFAULT_REPOSITORY) -> None:
        self.index = index
        self.repository = repository
        self.reported: List[ReportedIssue] = []

    def save(self, issue: Issue) -> bool:
        logger.debug(
            "Creating issue to save. RuleKey:'%s' File:%s", issue.rule_key, issue.absolute_file_path
        )
        source = self.index.lookup(issue.absolute_file_path)
        if source is None:
            _log_skipped(issue, "file is not part of the analyzed file set")
            return False
        try:
            text_range = to_text_range(issue, source)
        except (ValueError, OSError) as exc:
            _log_skipped(issue, f"invalid location: {exc}")
            return False

        self.reported.append(
            ReportedIssue(
                repository=self.repository,
                rule_key=issue.rule_key,
                message=issue.message,
                absolute_file_path=issue.absolute_file_path,
                file_path=source.relative_path,
                text_range=text_range,
            )
        )
        return True

    def to_rows(self) -> List[FSharpIssueResult]:
        """ORM rows for every reported issue; link them with save_scan_and_rows."""
        rows: List[FSharpIssueResult] = []
        for r in self.reported:
            rng = r.text_range
            rows.append(
                FSharpIssueResult(
                    file_path=r.file_path,
                    root=self.index.base_dir or "",
                    line_number=rng.start_line if rng else None,
                    end_line_number=rng.end_line if rng else None,
                    col_offset=rng.start_column if rng else None,
                    end_col_offset=rng.end_column if rng else None,
                    repository=r.repository,
                    rule_key=r.rule_key,
                    message=r.message,
                    absolute_file_path=r.absolute_file_path,
                )
            )
        return rows


def _log_skipped(issue: Issue, reason: str) -> None:
    logger.info(
        "Skipping an issue: reason:'%s'. file:'%s' line:%s",
        reason,
        issue.absolute_file_path,
        issue.start_line,
    )


__all__ = [
    "DEFAULT_REPOSITORY",
    "FileIndex",
    "IssueSink",
    "ReportedIssue",
    "ReportingSink",
    "SinkReport",
    "SourceFile",
    "TextRange",
    "to_text_range",
]
