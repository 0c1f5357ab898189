"""Shared utilities for parsers and the reporting layer.

This module provides common helper functions including path normalization
and timestamp generation.

Functions
---------
now_iso : Generate ISO-8601 UTC timestamp
normalize_path : Canonical absolute form used as a lookup key
relativize_path : Make path relative to root
"""
from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


def now_iso() -> str:
    """Return current UTC timestamp in ISO-8601 format."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def normalize_path(path: Union[str, Path], cwd: Optional[str] = None) -> str:
    """
    Return an absolute, normalized, case-folded (on Windows) path string.
    Relative paths are resolved from `cwd` when given. Symlinks are not followed.
    """
    p = Path(path)
    if not p.is_absolute():
        p = (Path(cwd) if cwd else Path.cwd()) / p
    return os.path.normcase(os.path.normpath(str(p)))


def relativize_path(value: Optional[str], root: Optional[str]) -> Optional[str]:
    """
    Return `value` relative to `root` when both are provided and `value` lives
    under `root`. Falls back to the original string otherwise.
    """
    if not value or not root:
        return value
    try:
        rel = os.path.relpath(value, root)
    except ValueError:
        # different drives on Windows
        return value
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return value
    return Path(rel).as_posix()


__all__ = ["now_iso", "normalize_path", "relativize_path"]
