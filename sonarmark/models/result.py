"""Analysis result aggregate and its markdown rendering.

The markdown layout is consumed by downstream documentation tooling, so
``AnalysisResult.to_markdown`` must stay byte-for-byte stable for the same
input.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional
from urllib.parse import quote

from sonarmark.errors import OutOfRangeError
from sonarmark.models.findings import HotSpot, Issue, QualityCondition

MIN_DEPTH = 1
MAX_DEPTH = 6

_CONDITIONS_HEADER = "| Metric | Status | Comparator | Threshold | Actual |"
_CONDITIONS_ALIGNMENT = "|:-------------------------------|:-----:|:--:|--------:|-------:|"


@dataclass(frozen=True)
class AnalysisResult:
    """Everything fetched from the server for one analysis.

    Sequence fields are stored as tuples and the metric-name mapping as a
    read-only view, so an instance cannot change after construction.

    Attributes:
        server_url: Base URL of the server
        project_key: Server-side project key
        project_name: Display name of the project
        quality_gate_status: OK, WARN, ERROR or NONE (other values are kept as-is)
        conditions: Quality gate conditions in server order
        metric_names: Metric key to friendly name
        issues: Open and confirmed issues in server order
        hot_spots: Security hot-spots in server order
    """

    server_url: str
    project_key: str
    project_name: str
    quality_gate_status: str
    conditions: tuple[QualityCondition, ...] = field(default_factory=tuple)
    metric_names: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    issues: tuple[Issue, ...] = field(default_factory=tuple)
    hot_spots: tuple[HotSpot, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", tuple(self.conditions or ()))
        object.__setattr__(
            self, "metric_names", MappingProxyType(dict(self.metric_names or {}))
        )
        object.__setattr__(self, "issues", tuple(self.issues or ()))
        object.__setattr__(self, "hot_spots", tuple(self.hot_spots or ()))

    @property
    def dashboard_url(self) -> str:
        return (
            f"{self.server_url.rstrip('/')}/dashboard"
            f"?id={quote(self.project_key, safe='')}"
        )

    def to_markdown(self, depth: int = MIN_DEPTH) -> str:
        """Render the result as a markdown report.

        Args:
            depth: Heading level (1-6) of the report title; sections use
                one level deeper, capped at 6

        Returns:
            Markdown text, one trailing newline per line

        Raises:
            OutOfRangeError: If depth is not between 1 and 6
        """
        if depth < MIN_DEPTH or depth > MAX_DEPTH:
            raise OutOfRangeError(
                f"Depth must be between {MIN_DEPTH} and {MAX_DEPTH}", value=depth
            )

        heading = "#" * depth
        sub_heading = "#" * min(depth + 1, MAX_DEPTH)

        lines: list[str] = []
        lines.extend(self._header_lines(heading))
        lines.extend(self._condition_lines(sub_heading))
        lines.extend(self._issue_lines(sub_heading))
        lines.extend(self._hot_spot_lines(sub_heading))

        return "".join(f"{line}\n" for line in lines)

    def _header_lines(self, heading: str) -> list[str]:
        return [
            f"{heading} {self.project_name} Sonar Analysis",
            "",
            f"**Dashboard:** <{self.dashboard_url}>",
            "",
            f"**Quality Gate Status:** {self.quality_gate_status}",
            "",
        ]

    def _condition_lines(self, sub_heading: str) -> list[str]:
        if not self.conditions:
            return []

        lines = [
            f"{sub_heading} Conditions",
            "",
            _CONDITIONS_HEADER,
            _CONDITIONS_ALIGNMENT,
        ]
        for condition in self.conditions:
            metric_name = self.metric_names.get(condition.metric, condition.metric)
            lines.append(
                f"| {metric_name} "
                f"| {condition.status} "
                f"| {condition.comparator} "
                f"| {_text(condition.error_threshold)} "
                f"| {_text(condition.actual_value)} |"
            )
        lines.append("")
        return lines

    def _issue_lines(self, sub_heading: str) -> list[str]:
        lines = [
            f"{sub_heading} Issues",
            "",
            found_text(len(self.issues), "issue"),
            "",
        ]
        for issue in self.issues:
            location = self._location(issue.component, issue.line)
            lines.append(
                f"{location}: {issue.severity} {issue.type} [{issue.rule}] {issue.message}"
            )
            lines.append("")
        return lines

    def _hot_spot_lines(self, sub_heading: str) -> list[str]:
        lines = [
            f"{sub_heading} Security Hot-Spots",
            "",
            found_text(len(self.hot_spots), "security hot-spot"),
            "",
        ]
        for hot_spot in self.hot_spots:
            location = self._location(hot_spot.component, hot_spot.line)
            lines.append(
                f"{location}: {hot_spot.vulnerability_probability} "
                f"[{hot_spot.security_category}] {hot_spot.message}"
            )
            lines.append("")
        return lines

    def _location(self, component: str, line: Optional[int]) -> str:
        line_info = f"({line})" if line is not None else ""
        return f"{self.strip_project_prefix(component)}{line_info}"

    def strip_project_prefix(self, component: str) -> str:
        """Remove a leading ``<projectKey>:`` from a component path."""
        prefix = f"{self.project_key}:"
        if component.startswith(prefix):
            return component[len(prefix) :]
        return component


def found_text(count: int, singular_noun: str) -> str:
    """Format a pluralized count such as "Found no issues" or "Found 1 issue"."""
    if count == 0:
        return f"Found no {singular_noun}s"
    if count == 1:
        return f"Found 1 {singular_noun}"
    return f"Found {count} {singular_noun}s"


def _text(value: Optional[str]) -> str:
    return value if value is not None else ""
