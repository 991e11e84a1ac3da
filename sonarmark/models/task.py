"""Compute-engine task state model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sonarmark.errors import ResponseFormatError


class TaskStatus(str, Enum):
    """Status of a compute-engine task as reported by /api/ce/task.

    PENDING and IN_PROGRESS move forward to exactly one of the terminal
    states SUCCESS, FAILED or CANCELED.
    """

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELED = "CANCELED"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TaskStatus":
        """Map a server status string to a TaskStatus.

        Matching is case-insensitive. Unknown values are an error rather
        than being treated as still running.

        Raises:
            ResponseFormatError: If the value is not a known status
        """
        try:
            return cls((value or "").upper())
        except ValueError:
            raise ResponseFormatError(
                message=f"Unknown task status: {value}",
                error_code="REMOTE-UnknownTaskStatus",
                details={"status": value},
            ) from None

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {TaskStatus.SUCCESS, TaskStatus.FAILED, TaskStatus.CANCELED}
)


@dataclass(frozen=True)
class TaskResult:
    """Outcome of a compute-engine task.

    Attributes:
        status: Final (or current) task status
        analysis_id: Id of the produced analysis; only set on SUCCESS
    """

    status: TaskStatus
    analysis_id: Optional[str] = None
