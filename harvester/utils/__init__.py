"""Utility modules for configuration and logging."""

from .config import get_config, load_config, reset_config
from .logger import get_logger, set_package_log_level

__all__ = [
    # Configuration
    "get_config",
    "load_config",
    "reset_config",
    # Logging
    "get_logger",
    "set_package_log_level",
]
