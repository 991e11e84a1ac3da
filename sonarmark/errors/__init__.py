"""
Error handling framework for SonarMark.

This module provides the exception hierarchy shared by the report-task
parser, the server client, and the command-line runner.
"""

from sonarmark.errors.exceptions import (
    DescriptorNotFoundError,
    DescriptorUnreadableError,
    MissingAnalysisError,
    MissingFieldError,
    OperationError,
    OutOfRangeError,
    ResponseFormatError,
    SonarMarkError,
    TaskCanceledError,
    TaskFailedError,
    TaskTimeoutError,
    ValidationError,
)

__all__ = [
    # Base exception
    "SonarMarkError",
    # Input and configuration errors
    "ValidationError",
    "DescriptorNotFoundError",
    "DescriptorUnreadableError",
    "MissingFieldError",
    "OutOfRangeError",
    # Remote-state errors
    "OperationError",
    "ResponseFormatError",
    "TaskFailedError",
    "TaskCanceledError",
    "TaskTimeoutError",
    "MissingAnalysisError",
]
