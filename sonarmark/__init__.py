"""
SonarMark - SonarQube/SonarCloud analysis results as markdown reports.
"""

from dotenv import load_dotenv

from sonarmark.logging import configure_logging, get_logger, is_debug_mode, set_debug_mode
from sonarmark.version import __version__

# Load environment variables (SONAR_TOKEN, SONARMARK_*) from .env file
load_dotenv()

__all__ = [
    "__version__",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "set_debug_mode",
]
