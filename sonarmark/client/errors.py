"""Exception hierarchy for server client errors.

This module defines custom exceptions for HTTP client operations,
providing structured error information with status codes and details.
"""

from typing import Any, Optional

from sonarmark.errors import OperationError


class ClientError(OperationError):
    """Base exception for server client errors.

    All client exceptions inherit from this class, allowing
    callers to catch any transport error with a single except clause.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code if applicable, None otherwise.
        details: Additional error context as a dictionary.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message=message, details=details)


class ConnectionError(ClientError):
    """Failed to connect to the server.

    Raised when the client cannot establish a connection
    (network error, DNS failure, server unreachable, etc.).
    """

    pass


class TimeoutError(ClientError):
    """Request timed out.

    Raised when a single HTTP request exceeds the configured timeout.
    Distinct from TaskTimeoutError, which covers the task poll loop.
    """

    pass


class APIError(ClientError):
    """Server returned an error response or an unreadable body.

    The status_code attribute contains the HTTP response code.
    """

    pass
