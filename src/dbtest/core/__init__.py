"""Core infrastructure: configuration and logging."""

from dbtest.core.config import DbtestSettings, load_settings
from dbtest.core.logging import configure_cli_logging, configure_logging, get_logger

__all__ = [
    "DbtestSettings",
    "configure_cli_logging",
    "configure_logging",
    "get_logger",
    "load_settings",
]
