from __future__ import annotations

"""Common data models for analysis results.

This module defines the ``Issue`` record produced by the ``AnalysisOutput``
parser and the ``ParseResult`` union returned by a parse.

Classes
-------
Issue : One finding reported by the F# analyzer
ParseSuccess : Successful parse carrying every issue in document order
ParseFailure : Failed parse carrying exactly one AnalysisParseError

Examples
--------
>>> issue = Issue(
...     rule_key="R1",
...     message="Hard-coded password",
...     absolute_file_path="/src/Program.fs",
...     start_line=3,
... )
>>> issue.end_line is None
True

See Also
--------
fsauditor.core.models.parsers.analysis_output : The parser
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fsauditor.core.exceptions import AnalysisParseError, ParseErrorKind


class Issue(BaseModel):
    """A finding as written by the analyzer; immutable once built."""

    model_config = ConfigDict(frozen=True)

    rule_key: str = Field(min_length=1)
    message: str
    absolute_file_path: str
    start_line: Optional[int] = None
    start_column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None

    @field_validator("rule_key")
    @classmethod
    def _rule_key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("rule_key must not be blank")
        return value


@dataclass(frozen=True)
class ParseSuccess:
    issues: List[Issue]
    ok = True

    def unwrap(self) -> List[Issue]:
        return list(self.issues)


@dataclass(frozen=True)
class ParseFailure:
    error: AnalysisParseError
    ok = False

    @property
    def kind(self) -> ParseErrorKind:
        return self.error.kind

    def unwrap(self) -> List[Issue]:
        raise self.error


ParseResult = Union[ParseSuccess, ParseFailure]


__all__ = [
    "Issue",
    "ParseSuccess",
    "ParseFailure",
    "ParseResult",
]
