"""Configuration module for SonarMark."""

from sonarmark.config.settings import (
    ClientSettings,
    LoggingSettings,
    clear_settings_cache,
    get_client_settings,
    get_logging_settings,
)

__all__ = [
    "ClientSettings",
    "LoggingSettings",
    "clear_settings_cache",
    "get_client_settings",
    "get_logging_settings",
]
