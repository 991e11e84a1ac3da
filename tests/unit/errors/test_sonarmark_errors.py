"""Tests for the SonarMark exception hierarchy."""

import pytest

from sonarmark.client import APIError, ClientError
from sonarmark.errors import (
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


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [
            DescriptorNotFoundError,
            DescriptorUnreadableError,
            MissingFieldError,
            OutOfRangeError,
        ],
    )
    def test_input_errors(self, error_type):
        assert issubclass(error_type, ValidationError)
        assert issubclass(error_type, ValueError)
        assert issubclass(error_type, SonarMarkError)

    @pytest.mark.parametrize(
        "error_type",
        [
            ResponseFormatError,
            TaskFailedError,
            TaskCanceledError,
            TaskTimeoutError,
            MissingAnalysisError,
            ClientError,
            APIError,
        ],
    )
    def test_operation_errors(self, error_type):
        assert issubclass(error_type, OperationError)
        assert not issubclass(error_type, ValidationError)


class TestSonarMarkError:
    def test_attributes(self):
        error = SonarMarkError(
            "Something failed",
            error_code="X-1",
            details={"a": 1},
            suggestion="Try again",
        )

        assert str(error) == "Something failed"
        assert error.error_code == "X-1"
        assert error.details == {"a": 1}
        assert error.suggestion == "Try again"

    def test_details_default_to_empty(self):
        assert SonarMarkError("x").details == {}

    def test_missing_field(self):
        error = MissingFieldError("serverUrl", path="/tmp/report-task.txt")

        assert error.field == "serverUrl"
        assert str(error) == "Missing required field: serverUrl"
        assert error.details["path"] == "/tmp/report-task.txt"

    def test_out_of_range(self):
        error = OutOfRangeError("Depth must be between 1 and 6", value=9)

        assert error.value == 9
        assert error.error_code == "INPUT-OutOfRange"

    def test_api_error_status_code(self):
        error = APIError("boom", status_code=502)

        assert error.status_code == 502
        assert str(error) == "boom"
