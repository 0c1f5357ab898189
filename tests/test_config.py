"""Tests for configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from fsauditor.config import Config, ConfigLoader, get_default_config, load_config
from fsauditor.core.exceptions import ConfigurationError


def test_defaults_are_valid() -> None:
    config = get_default_config()
    assert config.validate() is True
    assert config.analysis.diagnostics_file == "sonarDiagnostics.xml"
    assert config.analysis.analysis_config_file == "sonarAnalysisConfig.xml"
    assert config.analysis.repository_key == "fsharpsecurity"
    assert config.analysis.file_suffixes == [".fs", ".fsx", ".fsi"]


def test_load_yaml_file(fixtures_dir: Path) -> None:
    config = load_config(fixtures_dir / "fsauditor.yaml", env=False)
    assert config.analysis.repository_key == "fsharp-custom"
    assert config.analysis.file_suffixes == [".fs"]
    assert config.database.enabled is False
    assert config.logging.level == "DEBUG"


def test_load_toml_file(tmp_path: Path) -> None:
    path = tmp_path / "fsauditor.toml"
    path.write_text(
        '[project]\nwork_dir = "work"\nexclude_patterns = ["generated"]\n'
        '[analysis]\nchunk_size = 4096\n',
        encoding="utf-8",
    )
    config = load_config(path, env=False)
    assert config.project.work_dir == "work"
    assert config.project.exclude_patterns == ["generated"]
    assert config.analysis.chunk_size == 4096


def test_env_overrides_file(fixtures_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FSAUDITOR_ANALYSIS__REPOSITORY_KEY", "from-env")
    monkeypatch.setenv("FSAUDITOR_DATABASE__ENABLED", "true")
    monkeypatch.setenv("FSAUDITOR_ANALYSIS__FILE_SUFFIXES", ".fs, .fsx")
    monkeypatch.setenv("FSAUDITOR_NOT_A_SECTION", "ignored")

    config = load_config(fixtures_dir / "fsauditor.yaml")

    assert config.analysis.repository_key == "from-env"
    assert config.database.enabled is True
    assert config.analysis.file_suffixes == [".fs", ".fsx"]


def test_dotenv_file_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # the autouse fixture already made tmp_path the working directory
    (tmp_path / ".env").write_text("FSAUDITOR_LOGGING__LEVEL=WARNING\n", encoding="utf-8")
    monkeypatch.setenv("FSAUDITOR_LOGGING__BACKUP_COUNT", "2")

    try:
        config = load_config()
    finally:
        # python-dotenv writes straight into os.environ
        os.environ.pop("FSAUDITOR_LOGGING__LEVEL", None)

    assert config.logging.level == "WARNING"
    assert config.logging.backup_count == 2


def test_args_override_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FSAUDITOR_DATABASE__URL", "sqlite:///env.db")
    config = load_config(args={"database_url": "sqlite:///args.db", "base_dir": str(tmp_path), "log_file": None})
    assert config.database.url == "sqlite:///args.db"
    assert config.project.base_dir == str(tmp_path)


def test_validation_lists_every_problem(tmp_path: Path) -> None:
    config = Config.from_dict(
        {
            "project": {"base_dir": str(tmp_path / "missing")},
            "analysis": {"chunk_size": 0},
            "logging": {"level": "LOUD"},
        }
    )
    with pytest.raises(ConfigurationError) as info:
        config.validate()
    errors = info.value.details["errors"]
    assert len(errors) == 3
    assert any("base_dir" in e for e in errors)
    assert any("chunk_size" in e for e in errors)
    assert any("LOUD" in e for e in errors)


@pytest.mark.parametrize(
    "name, content",
    [
        ("bad.yaml", "project: [unclosed"),
        ("bad.toml", "project = = 1"),
        ("bad.ini", "[project]"),
        ("list.yaml", "- a\n- b\n"),
        ("unknown.yaml", "project:\n  colour: blue\n"),
    ],
)
def test_bad_files_raise_configuration_error(tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        ConfigLoader().load_from_file(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "absent.yaml")


def test_to_dict_round_trip() -> None:
    config = get_default_config()
    assert Config.from_dict(config.to_dict()) == config


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("Off", False), ("42", 42), ("1.5", 1.5), ("sqlite:///x.db", "sqlite:///x.db")],
)
def test_parse_value(raw: str, expected) -> None:
    assert ConfigLoader._parse_value(raw) == expected
