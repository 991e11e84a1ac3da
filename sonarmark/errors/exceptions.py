"""
Exception hierarchy for SonarMark.

Errors fall into two categories that the command-line runner reports
differently from unexpected failures:

- ValidationError: bad input or configuration (missing report-task.txt
  fields, out-of-range heading depth, non-positive poll timeout). Surfaced
  immediately and never retried.
- OperationError: the server or the analysis task is in a state the tool
  cannot work with (HTTP failures, malformed responses, failed/canceled
  tasks, poll timeouts).
"""

from typing import Any, Optional


class SonarMarkError(Exception):
    """
    Base exception class for all SonarMark errors.

    Attributes:
        message: Human-readable error message
        error_code: Optional error code for reference and documentation
        details: Optional dictionary with additional error details
        suggestion: Optional suggestion text for how to fix the error
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


# --- Validation Errors ---


class ValidationError(SonarMarkError, ValueError):
    """
    Base class for input and configuration errors.

    Also a ValueError so that callers which only know about the standard
    library hierarchy can still handle bad arguments.
    """

    pass


class DescriptorNotFoundError(ValidationError):
    """Exception raised when a report-task.txt file does not exist."""

    pass


class DescriptorUnreadableError(ValidationError):
    """Exception raised when a report-task.txt file exists but cannot be read."""

    pass


class MissingFieldError(ValidationError):
    """
    Exception raised when a required report-task.txt field is absent or blank.

    Attributes:
        field: Name of the missing field (e.g. "projectKey")
    """

    def __init__(self, field: str, path: Optional[str] = None) -> None:
        self.field = field
        super().__init__(
            message=f"Missing required field: {field}",
            error_code="INPUT-MissingField",
            details={"field": field, "path": path},
        )


class OutOfRangeError(ValidationError):
    """
    Exception raised when a numeric argument falls outside its allowed range.

    Attributes:
        value: The rejected value
    """

    def __init__(self, message: str, value: Any) -> None:
        self.value = value
        super().__init__(
            message=message,
            error_code="INPUT-OutOfRange",
            details={"value": value},
        )


# --- Operation Errors ---


class OperationError(SonarMarkError):
    """Base class for errors caused by remote server or task state."""

    pass


class ResponseFormatError(OperationError):
    """Exception raised when a server response lacks a required structure."""

    pass


class TaskFailedError(OperationError):
    """Exception raised when a compute-engine task ends in FAILED state."""

    pass


class TaskCanceledError(OperationError):
    """Exception raised when a compute-engine task ends in CANCELED state."""

    pass


class TaskTimeoutError(OperationError):
    """Exception raised when a task does not finish within the poll timeout."""

    pass


class MissingAnalysisError(OperationError):
    """Exception raised when a successful task reports no analysis id."""

    pass
