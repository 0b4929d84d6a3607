"""Logging setup for the catalog harvester.

Handlers are attached once, to the ``harvester`` package logger. Module
loggers are its children and propagate to it, so set_package_log_level
changes the verbosity of the whole package in one place. Output goes to a
colored console stream and to a rotating ``harvester.log`` file.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import colorlog


PACKAGE_LOGGER = "harvester"

CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

# 10 MB per file, five rotated backups
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _resolve_level(level: Optional[str]) -> int:
    """Map a level name to its number; LOG_LEVEL env var, then INFO."""
    name = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    return getattr(logging, name, logging.INFO)


def _configure_package_logger(log_dir: Optional[Path], level: Optional[str]) -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(CONSOLE_FORMAT, log_colors=LOG_COLORS))

    log_dir = Path(log_dir or os.environ.get('HARVESTER_LOG_DIR', 'logs'))
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / "harvester.log",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    package_logger.addHandler(console_handler)
    package_logger.addHandler(file_handler)
    package_logger.setLevel(_resolve_level(level))
    package_logger.propagate = False
    return package_logger


def get_logger(name: str, log_dir: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Get a logger that writes through the package handlers.

    The first call configures the handlers; ``log_dir`` and ``level`` are
    ignored afterwards. Names outside the package are nested under it.

    Args:
        name: Logger name (typically __name__ from calling module)
        log_dir: Directory for the log file (default: HARVESTER_LOG_DIR or ./logs)
        level: Initial level name (default: LOG_LEVEL env var or INFO)

    Returns:
        Logger instance
    """
    _configure_package_logger(log_dir, level)
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def set_package_log_level(level: str) -> None:
    """Apply a log level to every harvester logger."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(_resolve_level(level))
