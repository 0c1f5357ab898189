# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""Configuration loader for fsauditor.

This module handles loading configuration from multiple sources with
well-defined precedence rules.

Configuration Sources
---------------------
Priority order (highest to lowest):

1. Command-line arguments (highest priority)
2. Environment variables (prefixed with FSAUDITOR_, ``.env`` included)
3. Configuration file (YAML or TOML)
4. Default values (lowest priority)

Environment Variables
---------------------
All environment variables must be prefixed with ``FSAUDITOR_``. For nested
configuration, use double underscores: ``FSAUDITOR_DATABASE__URL``.
List options take comma-separated values:
``FSAUDITOR_ANALYSIS__FILE_SUFFIXES=.fs,.fsx``.

Examples
--------
Load from YAML file:
    >>> loader = ConfigLoader()
    >>> config = loader.load_config('fsauditor.yaml')
    >>> config.database.url
    'sqlite:///out/fsauditor.sqlite3'

See Also
--------
config_schema : Configuration schema definitions
"""
from __future__ import annotations

import os
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import find_dotenv, load_dotenv

try:
    import tomllib
except ImportError:  # Python < 3.11
    import tomli as tomllib

from fsauditor.core.exceptions import ConfigurationError

from .config_schema import Config


class ConfigLoader:
    """Configuration loader that supports multiple sources.

    Attributes
    ----------
    ENV_PREFIX : str
        Prefix for environment variables ('FSAUDITOR_').
    config : Config
        Internal configuration object.

    Notes
    -----
    The loader validates the merged result, so invalid configurations raise
    ConfigurationError before anything runs.
    """

    ENV_PREFIX = "FSAUDITOR_"

    # command-line argument name -> (section, option)
    ARG_MAPPING = {
        "base_dir": ("project", "base_dir"),
        "work_dir": ("project", "work_dir"),
        "database_url": ("database", "url"),
        "db_enabled": ("database", "enabled"),
        "log_level": ("logging", "level"),
        "log_file": ("logging", "file"),
        "repository_key": ("analysis", "repository_key"),
        "chunk_size": ("analysis", "chunk_size"),
    }

    def __init__(self):
        self.config = Config()

    def load_from_file(self, file_path: Union[str, Path]) -> Config:
        """
        Load configuration from a file.

        Supports YAML and TOML formats based on file extension. A top-level
        ``fsauditor`` key, when present, holds the sections.

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise ConfigurationError("file_path", f"Configuration file not found: {file_path}")

        try:
            if path.suffix in (".yaml", ".yml"):
                with open(path, "r", encoding="utf-8") as f:
                    config_dict = yaml.safe_load(f) or {}
            elif path.suffix == ".toml":
                with open(path, "rb") as f:
                    config_dict = tomllib.load(f)
            else:
                raise ConfigurationError(
                    "file_format", f"Unsupported configuration file format: {path.suffix}"
                )
        except yaml.YAMLError as e:
            raise ConfigurationError("yaml_parse", f"Failed to parse YAML configuration: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError("toml_parse", f"Failed to parse TOML configuration: {e}") from e
        except OSError as e:
            raise ConfigurationError("file_load", f"Failed to load configuration file: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError("file_format", "Configuration root must be a mapping")
        if "fsauditor" in config_dict:
            config_dict = config_dict["fsauditor"]

        try:
            self.config = Config.from_dict(config_dict)
        except TypeError as e:
            # unknown option names in a section
            raise ConfigurationError("file_load", f"Invalid configuration: {e}") from e
        return self.config

    def load_from_env(self, dotenv_path: Optional[Union[str, Path]] = None) -> Config:
        """
        Load configuration from environment variables.

        A ``.env`` file is read first (python-dotenv); variables already set
        in the process environment win over it.

        Example:
            FSAUDITOR_PROJECT__BASE_DIR=/path/to/solution
            FSAUDITOR_DATABASE__ENABLED=false
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)

        env_config: Dict[str, Dict[str, Any]] = {}
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            parts = key[len(self.ENV_PREFIX):].lower().split("__")
            if len(parts) == 2:
                section, option = parts
                env_config.setdefault(section, {})[option] = self._parse_value(value)

        if env_config:
            self._merge_config(env_config)

        return self.config

    def load_from_args(self, args: Dict[str, Any]) -> Config:
        if not args:
            return self.config

        for arg_name, value in args.items():
            if value is not None and arg_name in self.ARG_MAPPING:
                section, option = self.ARG_MAPPING[arg_name]
                self._set_config_value(section, option, value)

        return self.config

    def load_config(
        self,
        config_file: Optional[Union[str, Path]] = None,
        env: bool = True,
        args: Optional[Dict[str, Any]] = None,
    ) -> Config:
        """
        Load configuration from multiple sources.

        Args:
            config_file: Path to configuration file (optional)
            env: Whether to load from environment variables
            args: Command-line arguments dictionary (optional)

        Returns:
            Validated Config instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        self.config = Config()

        if config_file:
            self.load_from_file(config_file)

        if env:
            self.load_from_env()

        if args:
            self.load_from_args(args)

        self.config.validate()

        return self.config

    def _merge_config(self, partial_config: Dict[str, Any]):
        for section, values in partial_config.items():
            for option, value in values.items():
                self._set_config_value(section, option, value)

    def _set_config_value(self, section: str, option: str, value: Any):
        section_obj = getattr(self.config, section, None)
        if not is_dataclass(section_obj):
            return
        if option not in {f.name for f in fields(section_obj)}:
            return
        if isinstance(getattr(section_obj, option), list) and isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]
        setattr(section_obj, option, value)

    @staticmethod
    def _parse_value(value: str) -> Any:
        """
        Parse string value to appropriate type.

        Returns:
            Parsed value (bool, int, float, or str)
        """
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    env: bool = True,
    args: Optional[Dict[str, Any]] = None,
) -> Config:
    """Convenience wrapper around ``ConfigLoader().load_config``."""
    loader = ConfigLoader()
    return loader.load_config(config_file=config_file, env=env, args=args)


__all__ = ["ConfigLoader", "load_config"]
