"""Server HTTP client module.

Provides the SonarQube/SonarCloud web API client with consistent error
handling, task polling and lenient response parsing.
"""

from sonarmark.client.errors import (
    APIError,
    ClientError,
    ConnectionError,
    TimeoutError,
)
from sonarmark.client.sonar_client import PAGE_SIZE, SonarQubeClient

__all__ = [
    "SonarQubeClient",
    "PAGE_SIZE",
    "ClientError",
    "ConnectionError",
    "TimeoutError",
    "APIError",
]
