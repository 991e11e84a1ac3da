"""Quality gate conditions, issues and security hot-spots."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class QualityCondition:
    """One quality gate rule evaluated against an analysis.

    Attributes:
        metric: Metric key (e.g. "new_coverage")
        comparator: Comparison operator (e.g. "LT", "GT")
        error_threshold: Threshold that triggers an error, if any
        actual_value: Measured value, if any
        status: Condition status (e.g. "OK", "ERROR")
    """

    metric: str
    comparator: str
    error_threshold: Optional[str]
    actual_value: Optional[str]
    status: str


@dataclass(frozen=True)
class Issue:
    """An open or confirmed issue reported by the server.

    The component is server-qualified as ``<projectKey>:<relativePath>``.
    """

    key: str
    rule: str
    severity: str
    component: str
    line: Optional[int]
    message: str
    type: str


@dataclass(frozen=True)
class HotSpot:
    """A code location flagged for manual security review."""

    key: str
    component: str
    line: Optional[int]
    message: str
    security_category: str
    vulnerability_probability: str
