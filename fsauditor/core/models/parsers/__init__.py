"""Parsers for F# analyzer documents.

This package contains the streaming reader and the schema-strict parser for
the ``AnalysisOutput`` document written by the external F# security analyzer.

Modules
-------
reader : Pull-style XML tokenizer (lxml)
analysis_output : State-machine parser producing Issue records
common : Issue and ParseResult models

Parser Functions
----------------
- parse_analysis_output : Parse a document into ParseSuccess / ParseFailure
- load_analysis_output : Parse a document, raising on failure
- parse_tokens : Drive the state machine with crafted tokens

Examples
--------
    >>> from fsauditor.core.models.parsers import parse_analysis_output
    >>> result = parse_analysis_output("sonarDiagnostics.xml")
    >>> [issue.rule_key for issue in result.unwrap()]
    ['R1', 'R2']

See Also
--------
fsauditor.application.sink : Consumer of the parsed issues
"""
from __future__ import annotations

from .analysis_output import (
    ParserContext,
    ParserState,
    load_analysis_output,
    parse_analysis_output,
    parse_tokens,
    read_element,
    read_int_element,
)
from .common import Issue, ParseFailure, ParseResult, ParseSuccess
from .reader import DocumentReader, Token, TokenKind

__all__ = [
    "Issue",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "ParserContext",
    "ParserState",
    "DocumentReader",
    "Token",
    "TokenKind",
    "load_analysis_output",
    "parse_analysis_output",
    "parse_tokens",
    "read_element",
    "read_int_element",
]
