"""Command-line interface for fsauditor.

This package provides the CLI application built with Typer.

Modules
-------
cli : Main CLI implementation
main : Console-script entry point

Examples
--------
Run from command line:
    $ python -m fsauditor import work/sonarDiagnostics.xml --base-dir src

See Also
--------
fsauditor.application : Application logic
"""
from __future__ import annotations

from .cli import app

__all__ = ["app"]
