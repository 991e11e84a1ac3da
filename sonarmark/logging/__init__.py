"""
Logging system for SonarMark.

This module provides a centralized logging configuration with a colored
console output and a global debug flag.
"""

from sonarmark.logging.config import (
    ColorFormatter,
    configure_logging,
    get_logger,
    is_debug_mode,
    set_debug_mode,
)

__all__ = [
    "ColorFormatter",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "set_debug_mode",
]
