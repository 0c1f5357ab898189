"""fsauditor - F# security analysis result importer.

fsauditor bridges the XML diagnostics written by an external F# security
analyzer into a quality-analysis reporting layer. It reads the analyzer's
``AnalysisOutput`` document with a streaming, schema-strict parser, resolves
every finding against the known source files and stores the results.

The package provides:
- A pull-style parser for the ``AnalysisOutput`` document
- Writers for the analyzer's input configuration and output documents
- An issue sink that maps findings onto source files and text ranges
- Database-backed result storage and JSON export
- A Typer command line interface

Examples
--------
Import a diagnostics file from the command line:
    $ python -m fsauditor import .fsauditor/sonarDiagnostics.xml --base-dir src

Parse from Python:
    >>> from fsauditor.core.models.parsers import parse_analysis_output
    >>> result = parse_analysis_output("sonarDiagnostics.xml")
    >>> result.ok
    True

See Also
--------
fsauditor.cli.cli : Command-line interface
fsauditor.application : Import orchestration layer
fsauditor.core : Core domain models and exceptions
"""
from __future__ import annotations

__version__ = "1.0.0"
__author__ = "Anush Krishna"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
