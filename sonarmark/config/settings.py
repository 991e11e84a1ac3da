"""
SonarMark Settings Manager - Runtime configuration management.

This module provides access to configuration settings with environment
variable support. Command-line options always take precedence over these
defaults.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ClientSettings(BaseSettings):
    """Server client settings.

    Environment variables:
        SONARMARK_REQUEST_TIMEOUT: Timeout (seconds) for each HTTP request. Default: 30
        SONARMARK_POLL_TIMEOUT: Maximum time (seconds) to wait for an analysis
            task to finish. Default: 300
        SONARMARK_POLL_INTERVAL: Delay (seconds) between task status polls. Default: 10
    """

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for each HTTP request",
    )
    poll_timeout: float = Field(
        default=300.0,
        gt=0,
        description="Maximum seconds to wait for a compute-engine task",
    )
    poll_interval: float = Field(
        default=10.0,
        gt=0,
        description="Seconds between compute-engine task status polls",
    )

    model_config = SettingsConfigDict(env_prefix="SONARMARK_")


class LoggingSettings(BaseSettings):
    """Logging Settings.

    Environment variables:
        SONARMARK_LOGGING_LEVEL: Console log level when not verbose. Default: WARNING
    """

    level: str = Field(default="WARNING")

    @field_validator("level")
    @classmethod
    def valid_log_level(cls, v: str) -> str:
        """Validate that the logging level is valid."""
        upper_v = v.strip().upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid logging level: {v}. Must be one of {list(VALID_LOG_LEVELS)}"
            )
        return upper_v

    model_config = SettingsConfigDict(env_prefix="SONARMARK_LOGGING_")


# Cache settings to avoid repeated env access
@lru_cache
def get_client_settings() -> ClientSettings:
    """Get client settings with caching."""
    return ClientSettings()


@lru_cache
def get_logging_settings() -> LoggingSettings:
    """Get logging settings with caching."""
    return LoggingSettings()


# Clear settings cache (for testing)
def clear_settings_cache() -> None:
    """Clear settings cache."""
    get_client_settings.cache_clear()
    get_logging_settings.cache_clear()


__all__ = [
    "ClientSettings",
    "LoggingSettings",
    "get_client_settings",
    "get_logging_settings",
    "clear_settings_cache",
]
