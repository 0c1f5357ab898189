"""Core domain logic for fsauditor.

This package contains the core business logic, including data models, the
``AnalysisOutput`` parser, exceptions and logging configuration.
"""
from __future__ import annotations

from .exceptions import (
    AnalysisParseError,
    ConfigurationError,
    DatabaseError,
    FileSystemError,
    FSAuditorError,
    InvalidInteger,
    ParseErrorKind,
    ParserError,
    PrematureEnd,
    SchemaViolation,
    StreamFailure,
)

__all__ = [
    "AnalysisParseError",
    "ConfigurationError",
    "DatabaseError",
    "FileSystemError",
    "FSAuditorError",
    "InvalidInteger",
    "ParseErrorKind",
    "ParserError",
    "PrematureEnd",
    "SchemaViolation",
    "StreamFailure",
]
