"""Main entry point for running fsauditor as a module.

This module enables running fsauditor via `python -m fsauditor`.

Examples
--------
$ python -m fsauditor --help
$ python -m fsauditor import sonarDiagnostics.xml --base-dir src

See Also
--------
fsauditor.cli.cli : CLI implementation
"""
from __future__ import annotations

from .cli.main import main


if __name__ == "__main__":
    main()
