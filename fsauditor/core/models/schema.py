"""Pydantic schema models for data validation.

This module re-exports the validated models used across the application:
the parsed ``Issue`` and the parse result union.

Classes
-------
Issue : One analyzer finding
ParseSuccess : Successful parse
ParseFailure : Failed parse

Examples
--------
>>> issue = Issue(
...     rule_key="SEC001",
...     message="Security issue",
...     absolute_file_path="/src/Program.fs",
...     start_line=10
... )

See Also
--------
fsauditor.core.models.orm : Database ORM models
"""
from __future__ import annotations

from .parsers.common import Issue, ParseFailure, ParseResult, ParseSuccess
from .parsers.analysis_output import load_analysis_output, parse_analysis_output


__all__ = [
    "Issue",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "load_analysis_output",
    "parse_analysis_output",
]
