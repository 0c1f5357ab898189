"""Source file discovery for F# projects.

This module finds the F# source files the analyzer is pointed at and that
parsed issues are resolved against, skipping build output, package caches
and other non-source directories.

Supported Suffixes
------------------
- F# source (.fs)
- F# signature (.fsi)
- F# script (.fsx)

Excluded Directories
--------------------
Common exclusions include:
- Version control: .git, .hg, .svn
- .NET build output: bin, obj
- Package caches: packages, .paket, .nuget, node_modules
- IDE folders: .vs, .idea, .vscode

Examples
--------
Discover all F# files in a directory:
    >>> files = discover_files(Path("/path/to/solution"))
    >>> len(files)
    150

Check if directory should be excluded:
    >>> _dir_is_excluded("obj")
    True
    >>> _dir_is_excluded("src")
    False

See Also
--------
fsauditor.application.sink : Uses the discovered files as its known file set
"""
from __future__ import annotations

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List, Optional, Set

DEFAULT_SUFFIXES = (".fs", ".fsx", ".fsi")

# Directories that are almost never relevant to source discovery
EXCLUDED_DIRS_EXACT: Set[str] = {
    ".git",
    ".hg",
    ".svn",
    "bin",
    "obj",
    "packages",
    ".paket",
    ".nuget",
    "node_modules",
    ".fake",
    ".ionide",
    ".vs",
    ".idea",
    ".vscode",
    "TestResults",
}

# Optional glob-style patterns for directories
EXCLUDED_DIRS_GLOBS: Set[str] = {
    "*.egg-info",
    "artifacts*",
}


def _dir_is_excluded(dirname: str, extra_patterns: Iterable[str] = ()) -> bool:
    """Check if directory should be excluded from file discovery.

    Parameters
    ----------
    dirname : str
        Directory name (basename, not full path) to check.
    extra_patterns : Iterable[str]
        Additional glob patterns from configuration.

    Returns
    -------
    bool
        True if directory should be excluded, False otherwise.
    """
    if dirname in EXCLUDED_DIRS_EXACT:
        return True
    for pat in (*EXCLUDED_DIRS_GLOBS, *extra_patterns):
        if fnmatch(dirname, pat):
            return True
    # Skip hidden dirs, except the ones worth keeping
    if dirname.startswith(".") and dirname not in {".github", ".config"}:
        return True
    return False


def discover_files(
    root: Path,
    suffixes: Iterable[str] = DEFAULT_SUFFIXES,
    exclude_patterns: Optional[Iterable[str]] = None,
) -> List[Path]:
    """Discover all F# source files under a root directory.

    Parameters
    ----------
    root : Path
        Root directory to start discovery from.
    suffixes : Iterable[str]
        File suffixes to collect, compared case-insensitively.
    exclude_patterns : Iterable[str], optional
        Extra glob patterns; directories and files matching any are skipped.

    Returns
    -------
    List[Path]
        Sorted list of absolute paths.
    """
    wanted = {s.lower() if s.startswith(".") else f".{s.lower()}" for s in suffixes}
    patterns = list(exclude_patterns or ())
    found: Set[Path] = set()

    # Use os.walk with in-place dir filtering for performance
    for dirpath, dirnames, filenames in os.walk(Path(root).absolute(), followlinks=False):
        dirnames[:] = [d for d in dirnames if not _dir_is_excluded(d, patterns)]
        for filename in filenames:
            if Path(filename).suffix.lower() not in wanted:
                continue
            if any(fnmatch(filename, pat) for pat in patterns):
                continue
            found.add(Path(dirpath) / filename)

    return sorted(found)


__all__ = ["DEFAULT_SUFFIXES", "discover_files"]
