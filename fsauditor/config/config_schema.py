# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""Configuration schema and validation for fsauditor.

This module defines the configuration structure, default values, and
validation logic for all application settings.

Classes
-------
Config : Main configuration class
ProjectConfig : Source tree and analyzer work directory
AnalysisConfig : Analyzer document names and parser settings
DatabaseConfig : Database configuration
LoggingConfig : Logging configuration

Examples
--------
>>> config = Config.from_dict({"database": {"url": "sqlite:///audit.db"}})
>>> config.validate()
True

See Also
--------
fsauditor.config.config_loader : Configuration loading
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class ProjectConfig:
    """Configuration for the analyzed source tree."""

    base_dir: str = "."
    work_dir: str = "."
    exclude_patterns: List[str] = field(default_factory=list)

    def validate(self) -> List[str]:
        errors = []

        base = Path(self.base_dir)
        if not base.exists():
            errors.append(f"Project base_dir does not exist: {self.base_dir}")
        elif not base.is_dir():
            errors.append(f"Project base_dir is not a directory: {self.base_dir}")

        work = Path(self.work_dir)
        if work.exists() and not work.is_dir():
            errors.append(f"Project work_dir is not a directory: {self.work_dir}")

        return errors


@dataclass
class AnalysisConfig:
    """Configuration for the analyzer documents and the parser."""

    diagnostics_file: str = "sonarDiagnostics.xml"
    analysis_config_file: str = "sonarAnalysisConfig.xml"
    repository_key: str = "fsharpsecurity"
    file_suffixes: List[str] = field(default_factory=lambda: [".fs", ".fsx", ".fsi"])
    chunk_size: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.diagnostics_file.strip():
            errors.append("diagnostics_file must not be empty")
        if not self.analysis_config_file.strip():
            errors.append("analysis_config_file must not be empty")
        if not self.repository_key.strip():
            errors.append("repository_key must not be empty")
        if not self.file_suffixes:
            errors.append("file_suffixes must list at least one suffix")
        if self.chunk_size is not None and self.chunk_size < 1:
            errors.append(f"chunk_size must be >= 1, got {self.chunk_size}")

        return errors


@dataclass
class DatabaseConfig:
    """Configuration for database operations."""

    url: str = "sqlite:///out/fsauditor.sqlite3"
    enabled: bool = True

    def validate(self) -> List[str]:
        errors = []

        if self.enabled and "://" not in self.url:
            errors.append(f"Invalid database url: {self.url}")

        return errors


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    file: str = "logs/fsauditor.log"
    console: bool = True
    file_output: bool = False
    max_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5

    def validate(self) -> List[str]:
        errors = []

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            errors.append(f"Invalid log level: {self.level}")

        if self.max_bytes < 1024:
            errors.append(f"max_bytes too small: {self.max_bytes}")

        if self.backup_count < 0:
            errors.append(f"backup_count must be >= 0, got {self.backup_count}")

        return errors


@dataclass
class Config:
    """
    Main configuration class for fsauditor.

    This class aggregates all configuration sections and provides
    validation and loading functionality.
    """

    project: ProjectConfig = field(default_factory=ProjectConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> bool:
        """
        Validate entire configuration.

        Returns:
            True if valid

        Raises:
            ConfigurationError: If any validation fails, listing every problem
        """
        from fsauditor.core.exceptions import ConfigurationError

        all_errors = []
        all_errors.extend(self.project.validate())
        all_errors.extend(self.analysis.validate())
        all_errors.extend(self.database.validate())
        all_errors.extend(self.logging.validate())

        if all_errors:
            error_msg = "\n".join(f"  - {err}" for err in all_errors)
            raise ConfigurationError(
                "configuration",
                f"Configuration validation failed:\n{error_msg}",
                {"errors": all_errors},
            )

        return True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """
        Create configuration from dictionary.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Config instance
        """
        return cls(
            project=ProjectConfig(**config_dict.get("project", {})),
            analysis=AnalysisConfig(**config_dict.get("analysis", {})),
            database=DatabaseConfig(**config_dict.get("database", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )


def get_default_config() -> Config:
    return Config()
