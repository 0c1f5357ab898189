# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""Custom exception hierarchy for fsauditor.

This module defines all custom exceptions used throughout the application,
providing a clear error hierarchy for better error handling and debugging.

All exceptions inherit from FSAuditorError to allow catching application-specific
errors separately from standard Python exceptions.

Exception Hierarchy
-------------------
FSAuditorError (base)
├── ParserError
│   └── AnalysisParseError
│       ├── SchemaViolation
│       ├── PrematureEnd
│       ├── InvalidInteger
│       └── StreamFailure
├── DatabaseError
├── ConfigurationError
└── FileSystemError

The four ``AnalysisParseError`` subclasses are also tagged with a
``ParseErrorKind`` so they can be carried around as values (see
``fsauditor.core.models.parsers.common.ParseFailure``) and matched on
without catching them.

Examples
--------
>>> try:
...     raise PrematureEnd('ISSUES', source_path='/tmp/out.xml', line=12)
... except AnalysisParseError as e:
...     print(e.kind.value, e.line)
premature_end 12
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class FSAuditorError(Exception):
    """Base exception for all fsauditor errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Dictionary containing additional error context. Default is None.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Additional error context information.

    Examples
    --------
    >>> error = FSAuditorError("Something went wrong", {"code": 500})
    >>> error.message
    'Something went wrong'
    >>> error.details['code']
    500
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParserError(FSAuditorError):
    """Raised when parsing tool output fails.

    Parameters
    ----------
    parser_name : str
        Name of the parser that failed.
    message : str
        Error message describing the parsing failure.
    details : dict, optional
        Additional context (file path, line number, etc.). Default is None.

    Attributes
    ----------
    parser_name : str
        The name of the failed parser.

    Examples
    --------
    >>> error = ParserError('analysis-output', 'Invalid XML')
    >>> error.parser_name
    'analysis-output'
    """

    def __init__(self, parser_name: str, message: str, details: dict = None):
        details = details or {}
        details['parser'] = parser_name
        super().__init__(f"Parser '{parser_name}' failed: {message}", details)
        self.parser_name = parser_name


class ParseErrorKind(str, Enum):
    """Tag identifying which of the four parse failures occurred."""

    SCHEMA_VIOLATION = "schema_violation"
    PREMATURE_END = "premature_end"
    INVALID_INTEGER = "invalid_integer"
    STREAM_FAILURE = "stream_failure"


class AnalysisParseError(ParserError):
    """Raised when an ``AnalysisOutput`` document cannot be parsed.

    The located message always reads ``<reason> in <path> at line <n>`` so
    it can be logged verbatim.

    Parameters
    ----------
    reason : str
        What went wrong, without location information.
    source_path : str
        Path of the document being parsed.
    line : int, optional
        1-based line number of the reader when the failure happened.
    details : dict, optional
        Additional context. Default is None.

    Attributes
    ----------
    kind : ParseErrorKind
        Failure tag, set by each subclass.
    reason : str
        The unlocated failure description.
    source_path : str
        The document path.
    line : int or None
        The reader line number.
    """

    kind: ParseErrorKind

    def __init__(
        self,
        reason: str,
        *,
        source_path: str,
        line: Optional[int] = None,
        details: dict = None,
    ):
        details = details or {}
        details.update({'kind': self.kind.value, 'path': source_path, 'line': line})
        located = f"{reason} in {source_path}"
        if line is not None:
            located += f" at line {line}"
        super().__init__('analysis-output', located, details)
        self.reason = reason
        self.source_path = source_path
        self.line = line
        # keep the located text as the message so callers can log it as-is
        self.message = located

    def __str__(self) -> str:
        return self.message


class SchemaViolation(AnalysisParseError):
    """Raised when an element name or nesting does not match the schema.

    Examples
    --------
    >>> error = SchemaViolation(
    ...     "Unexpected element in root: 'Report'",
    ...     expected='AnalysisOutput', found='Report',
    ...     source_path='out.xml', line=2,
    ... )
    >>> str(error)
    "Unexpected element in root: 'Report' in out.xml at line 2"
    """

    kind = ParseErrorKind.SCHEMA_VIOLATION

    def __init__(
        self,
        reason: str,
        *,
        expected: Optional[str] = None,
        found: Optional[str] = None,
        source_path: str,
        line: Optional[int] = None,
    ):
        super().__init__(
            reason,
            source_path=source_path,
            line=line,
            details={'expected': expected, 'found': found},
        )
        self.expected = expected
        self.found = found


class PrematureEnd(AnalysisParseError):
    """Raised when the token stream ends before a required closing tag."""

    kind = ParseErrorKind.PREMATURE_END

    def __init__(
        self,
        state: str,
        reason: Optional[str] = None,
        *,
        source_path: str,
        line: Optional[int] = None,
    ):
        reason = reason or f"Premature end of file while in state {state}"
        super().__init__(
            reason, source_path=source_path, line=line, details={'state': state}
        )
        self.state = state


class InvalidInteger(AnalysisParseError):
    """Raised when an integer leaf holds text that is not a base-10 integer."""

    kind = ParseErrorKind.INVALID_INTEGER

    def __init__(
        self,
        field: str,
        literal: str,
        *,
        source_path: str,
        line: Optional[int] = None,
    ):
        super().__init__(
            f'Expected an integer instead of "{literal}" for the element "{field}"',
            source_path=source_path,
            line=line,
            details={'field': field, 'literal': literal},
        )
        self.field = field
        self.literal = literal


class StreamFailure(AnalysisParseError):
    """Raised when the byte source or the XML tokenizer fails.

    Wraps ``OSError`` and ``lxml.etree.XMLSyntaxError``; the original
    exception is kept as ``__cause__``.
    """

    kind = ParseErrorKind.STREAM_FAILURE

    def __init__(
        self,
        reason: str,
        *,
        source_path: str,
        line: Optional[int] = None,
    ):
        super().__init__(reason, source_path=source_path, line=line)


class DatabaseError(FSAuditorError):
    """Raised when database operations fail.

    Parameters
    ----------
    operation : str
        Database operation that failed (e.g., 'insert', 'query', 'update').
    message : str
        Error message describing the database failure.
    details : dict, optional
        Additional context (table name, query, etc.). Default is None.

    Examples
    --------
    >>> error = DatabaseError('insert', 'Duplicate key violation')
    >>> error.operation
    'insert'
    """

    def __init__(self, operation: str, message: str, details: dict = None):
        details = details or {}
        details['operation'] = operation
        super().__init__(f"Database operation '{operation}' failed: {message}", details)
        self.operation = operation


class ConfigurationError(FSAuditorError):
    """Raised when there are configuration-related issues.

    Parameters
    ----------
    config_key : str
        Configuration key that caused the error.
    message : str
        Error message describing the configuration issue.
    details : dict, optional
        Additional context. Default is None.

    Examples
    --------
    >>> error = ConfigurationError('database.url', 'Invalid URL format')
    >>> error.config_key
    'database.url'
    """

    def __init__(self, config_key: str, message: str, details: dict = None):
        details = details or {}
        details['config_key'] = config_key
        super().__init__(f"Configuration error for '{config_key}': {message}", details)
        self.config_key = config_key


class FileSystemError(FSAuditorError):
    """Raised when file system operations fail.

    Parameters
    ----------
    path : str
        File or directory path that caused the error.
    message : str
        Error message describing the file system failure.
    details : dict, optional
        Additional context. Default is None.

    Examples
    --------
    >>> error = FileSystemError('/work/out', 'Permission denied')
    >>> error.path
    '/work/out'
    """

    def __init__(self, path: str, message: str, details: dict = None):
        details = details or {}
        details['path'] = path
        super().__init__(f"File system error for '{path}': {message}", details)
        self.path = path
