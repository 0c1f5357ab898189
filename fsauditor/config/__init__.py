# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""Configuration management for fsauditor.

This package handles application configuration loading from files,
environment variables and command-line arguments.

Modules
-------
config_loader : Configuration loading utilities
config_schema : Configuration data models

Examples
--------
>>> from fsauditor.config import ConfigLoader
>>> config = ConfigLoader().load_config("fsauditor.yaml")

See Also
--------
fsauditor.core.exceptions : Configuration errors
"""
from __future__ import annotations

from .config_loader import ConfigLoader, load_config
from .config_schema import (
    AnalysisConfig,
    Config,
    DatabaseConfig,
    LoggingConfig,
    ProjectConfig,
    get_default_config,
)

__all__ = [
    "AnalysisConfig",
    "Config",
    "ConfigLoader",
    "DatabaseConfig",
    "LoggingConfig",
    "ProjectConfig",
    "get_default_config",
    "load_config",
]
