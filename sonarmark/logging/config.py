"""
Logging configuration for SonarMark.

This module handles the centralized logging configuration including:
- Console output handler on stderr (stdout is reserved for tool output)
- Global debug flag mechanism
- Logger retrieval with consistent naming
"""

import logging
import sys
from typing import Any, Optional, Union

# Global debug flag
_DEBUG_MODE = False

# Component-specific log levels
_COMPONENT_LOG_LEVELS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}

# Default log format with detailed context (debug mode)
_DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s.%(funcName)s:%(lineno)d | %(message)s"

# Simplified format for console in normal mode
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Color formatting for console output
_LOG_COLORS = {
    "DEBUG": "\033[94m",  # Blue
    "INFO": "\033[92m",  # Green
    "WARNING": "\033[93m",  # Yellow
    "ERROR": "\033[91m",  # Red
    "CRITICAL": "\033[91m\033[1m",  # Bold Red
    "RESET": "\033[0m",  # Reset
}


class ColorFormatter(logging.Formatter):
    """Formatter that adds colors to log levels for console output."""

    def format(self, record):
        levelname = record.levelname
        if levelname in _LOG_COLORS:
            # Work on a copy so other handlers see the plain level name
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{_LOG_COLORS[levelname]}{levelname}{_LOG_COLORS['RESET']}"
            )
        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name and apply component-specific levels.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger(name)

    for component, level in _COMPONENT_LOG_LEVELS.items():
        if name.startswith(component):
            logger.setLevel(level)
            break

    return logger


def set_debug_mode(enabled: bool) -> None:
    """
    Set the global debug mode flag.

    Args:
        enabled: True to enable debug mode, False to disable
    """
    global _DEBUG_MODE
    old_value = _DEBUG_MODE
    _DEBUG_MODE = enabled

    if old_value != _DEBUG_MODE:
        root_logger = logging.getLogger("sonarmark")
        if enabled:
            root_logger.setLevel(logging.DEBUG)
            root_logger.debug("Debug mode enabled")
        else:
            root_logger.setLevel(logging.INFO)


def is_debug_mode() -> bool:
    """
    Check if debug mode is currently enabled.

    Returns:
        True if debug mode is enabled, False otherwise
    """
    return _DEBUG_MODE


def configure_logging(
    console_level: Union[int, str] = logging.WARNING,
    config: Optional[dict[str, Any]] = None,
) -> None:
    """
    Configure the central logging system with a console output.

    Args:
        console_level: Logging level (number or name) for console output
        config: Additional configuration options (console_format, debug_mode)
    """
    if config is None:
        config = {}

    debug_mode = config.get("debug_mode", is_debug_mode())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all logs and let handlers filter

    # Clear any existing handlers to avoid duplicates if reconfigured
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    sonarmark_logger = logging.getLogger("sonarmark")
    sonarmark_logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    for component, level in _COMPONENT_LOG_LEVELS.items():
        logging.getLogger(component).setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug_mode else console_level)
    default_format = _DEFAULT_FORMAT if debug_mode else _CONSOLE_FORMAT
    console_format = config.get("console_format", default_format)
    console_handler.setFormatter(ColorFormatter(console_format))
    root_logger.addHandler(console_handler)

    set_debug_mode(debug_mode)

    sonarmark_logger.debug(
        f"SonarMark logging initialized (console: {logging.getLevelName(console_handler.level)})"
    )

