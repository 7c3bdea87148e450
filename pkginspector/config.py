"""
Configuration management for pkginspector.

Settings come from an optional YAML config file, overridden by
PKGINSPECTOR_* environment variables.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

DEFAULT_HOME = Path.home() / ".pkginspector"
CONFIG_ENV_VAR = "PKGINSPECTOR_CONFIG"


class Settings(BaseSettings):
    """Application settings."""

    # Inspection Settings
    work_dir: str | None = None
    max_workers: int = 3

    # Recent Packages
    recent_file: str = str(DEFAULT_HOME / "recent.txt")
    recent_limit: int = 20

    # Logging
    log_level: str = "INFO"

    # Viewer handoff (set by the CLI reveal flags)
    reveal_file: str | None = None
    reveal_scripts: bool = False

    model_config = {"env_prefix": "PKGINSPECTOR_"}


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration values from a YAML file.

    Args:
        config_path: Explicit config file. Defaults to $PKGINSPECTOR_CONFIG,
            then ~/.pkginspector/config.yaml.

    Returns:
        Configuration dictionary (empty if the file doesn't exist)
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else DEFAULT_HOME / "config.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return config


def get_settings(config_path: Path | None = None) -> Settings:
    """
    Get application settings.

    Values from the config file are used where no PKGINSPECTOR_*
    environment variable is set.

    Returns:
        Settings instance
    """
    config = load_config(config_path)
    known = set(Settings.model_fields)

    overrides = {
        key: value
        for key, value in config.items()
        if key in known and f"PKGINSPECTOR_{key.upper()}" not in os.environ
    }

    return Settings(**overrides)
