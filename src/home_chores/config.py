"""Configuration file support for Home Chores."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / "home-chores" / "home-chores.toml"

DEFAULT_DATABASE_NAME = "tasks.db"
DEFAULT_THEME = "textual-dark"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M"
DEFAULT_LOG_DIR = Path.home() / ".local" / "state" / "home-chores"
DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Config:
    """Application configuration."""

    database_path: Path = field(default_factory=lambda: Path.cwd() / DEFAULT_DATABASE_NAME)
    theme: str = DEFAULT_THEME
    date_format: str = DEFAULT_DATE_FORMAT
    log_dir: Path = DEFAULT_LOG_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    export_dir: Path = field(default_factory=Path.cwd)


def load_config(path: Path | None = None) -> Config:
    """Load configuration from the config file.

    Returns the default configuration if:
    - The config file doesn't exist
    - The config file has invalid TOML syntax or can't be read

    Args:
        path: Config file to read; defaults to CONFIG_FILE.

    Returns:
        Config object with loaded or default values.
    """
    config_file = path if path is not None else CONFIG_FILE
    if not config_file.exists():
        return Config()

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring config file %s: %s", config_file, e)
        return Config()

    return _parse_config(data)


def _parse_path(value: str) -> Path:
    return Path(value).expanduser()


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse configuration from a dictionary.

    Keys with the wrong type are ignored.

    Args:
        data: Dictionary from parsed TOML file.

    Returns:
        Config object with parsed values.
    """
    config = Config()

    if isinstance(data.get("database_path"), str) and data["database_path"]:
        config.database_path = _parse_path(data["database_path"])

    if isinstance(data.get("theme"), str):
        config.theme = data["theme"]

    if isinstance(data.get("date_format"), str) and data["date_format"]:
        config.date_format = data["date_format"]

    if isinstance(data.get("log_dir"), str) and data["log_dir"]:
        config.log_dir = _parse_path(data["log_dir"])

    # Load log_level
    if isinstance(data.get("log_level"), str):
        value = data["log_level"].upper()
        if value in LOG_LEVELS:
            config.log_level = value

    if isinstance(data.get("export_dir"), str) and data["export_dir"]:
        config.export_dir = _parse_path(data["export_dir"])

    return config
