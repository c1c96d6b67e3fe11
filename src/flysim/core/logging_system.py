"""Logging setup for Fly.

All modules get their logger through :func:`get_logger`. The application
entry point calls :func:`initialize_logging` once, which configures the root
logger from ``config/logging.yaml`` (console output and an optional rotating
log file).

Typical usage:
    from flysim.core.logging_system import get_logger, initialize_logging

    initialize_logging()
    logger = get_logger(__name__)
    logger.info("Airplane initialized")
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import yaml

from flysim.core.resource_path import get_config_path

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LEVEL = "INFO"

# Handlers installed by initialize_logging(), removed on re-initialization
_installed_handlers: list[logging.Handler] = []


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        The named logger.
    """
    return logging.getLogger(name)


def load_logging_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load the ``logging`` section of a YAML file.

    Args:
        config_path: YAML file to read. Defaults to the bundled logging.yaml.

    Returns:
        The logging section, or an empty dict if the file does not exist.

    Raises:
        ValueError: If the file is not valid YAML or the section is not a mapping.
    """
    path = Path(config_path) if config_path is not None else get_config_path("logging.yaml")
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid logging config {path}: {e}") from e

    section = data.get("logging", {}) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ValueError(f"Invalid logging config {path}: 'logging' must be a mapping")
    return section


def initialize_logging(
    config_path: str | Path | None = None, level: str | None = None
) -> logging.Logger:
    """Configure the root logger.

    Args:
        config_path: YAML file with a ``logging`` section (level, format, file,
            max_size_mb, backup_count). Defaults to the bundled logging.yaml.
        level: Level name overriding the configured one (e.g., "DEBUG").

    Returns:
        The root logger.

    Raises:
        ValueError: If the configuration or the level name is invalid.
    """
    log_config = load_logging_config(config_path)

    level_name = (level or log_config.get("level", DEFAULT_LEVEL)).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    formatter = logging.Formatter(log_config.get("format", DEFAULT_FORMAT))

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    _installed_handlers.append(console_handler)

    # File handler with rotation (optional)
    log_file = log_config.get("file")
    if log_file:
        max_size_mb = log_config.get("max_size_mb", 10)
        backup_count = log_config.get("backup_count", 3)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    get_logger(__name__).debug("Logging initialized at %s", level_name)
    return root_logger
