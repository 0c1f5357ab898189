"""Shared test fixtures and configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

import pytest

from fsauditor.core.logging_config import ROOT_LOGGER_NAME
from fsauditor.core.models.parsers import Issue
from fsauditor.infra.documents import write_analysis_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PROGRAM_FS = """module Program

let password = "hunter2"
let main argv =
    printfn "%s" password
    0
"""


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def example_report(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sonarDiagnostics.xml"


@pytest.fixture(autouse=True)
def _reset_fsauditor_logger():
    """Undo handler and propagation changes made by setup_logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = True


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep FSAUDITOR_* variables and stray .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("FSAUDITOR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small F# solution with one source file plus build output."""
    root = tmp_path / "solution"
    (root / "src").mkdir(parents=True)
    (root / "src" / "Program.fs").write_text(PROGRAM_FS, encoding="utf-8")
    (root / "src" / "Types.fsi").write_text("module Types\n", encoding="utf-8")
    (root / "obj").mkdir()
    (root / "obj" / "Generated.fs").write_text("module Generated\n", encoding="utf-8")
    (root / "README.md").write_text("# solution\n", encoding="utf-8")
    return root


@pytest.fixture
def program_fs(source_tree: Path) -> Path:
    return source_tree / "src" / "Program.fs"


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    def _make(path, **kwargs) -> Issue:
        values = {"rule_key": "SEC001", "message": "Hard-coded password"}
        values.update(kwargs)
        return Issue(absolute_file_path=str(path), **values)

    return _make


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[[Iterable[Issue], str], Path]:
    def _write(issues: Iterable[Issue], name: str = "sonarDiagnostics.xml") -> Path:
        return write_analysis_output(list(issues), tmp_path / "work" / name)

    return _write
