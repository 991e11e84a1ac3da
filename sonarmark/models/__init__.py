"""Data model for analysis results."""

from sonarmark.models.findings import HotSpot, Issue, QualityCondition
from sonarmark.models.result import AnalysisResult, found_text
from sonarmark.models.task import TaskResult, TaskStatus

__all__ = [
    "AnalysisResult",
    "HotSpot",
    "Issue",
    "QualityCondition",
    "TaskResult",
    "TaskStatus",
    "found_text",
]
