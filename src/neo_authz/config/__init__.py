"""Configuration for neo-authz: settings and logging."""

from .logging_config import LoggingConfig, LogFormat, LogLevel, LogVerbosity, get_logger, setup_logging
from .settings import AuthzSettings, get_settings

__all__ = [
    "AuthzSettings",
    "get_settings",
    "LoggingConfig",
    "LogFormat",
    "LogLevel",
    "LogVerbosity",
    "get_logger",
    "setup_logging",
]
