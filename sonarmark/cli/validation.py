"""Self-validation of SonarMark against an in-process mock server.

Each check runs the full direct-query flow silently in a temporary
directory, with the server replaced by an httpx.MockTransport, and then
inspects the produced log and report files.
"""

import platform
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import httpx

from sonarmark.cli.context import Context, RunOptions
from sonarmark.cli.runner import print_banner, process_sonar_analysis
from sonarmark.client import SonarQubeClient
from sonarmark.logging import get_logger
from sonarmark.version import __version__

logger = get_logger(__name__)

MOCK_PROJECT_KEY = "SonarMarkMockProject"
MOCK_PROJECT_NAME = "Mock SonarMark Project"
MOCK_SERVER_URL = "https://mock.sonarqube.example"

# Returns None when the check passes, otherwise the failure reason
Validator = Callable[[str, Optional[str]], Optional[str]]

_MOCK_RESPONSES: dict[str, dict[str, Any]] = {
    "/api/components/show": {
        "component": {"key": MOCK_PROJECT_KEY, "name": MOCK_PROJECT_NAME},
    },
    "/api/qualitygates/project_status": {
        "projectStatus": {
            "status": "ERROR",
            "conditions": [
                {
                    "metricKey": "new_coverage",
                    "comparator": "LT",
                    "errorThreshold": "80",
                    "actualValue": "65.5",
                    "status": "ERROR",
                },
                {
                    "metricKey": "new_bugs",
                    "comparator": "GT",
                    "errorThreshold": "0",
                    "actualValue": "3",
                    "status": "ERROR",
                },
            ],
        },
    },
    "/api/issues/search": {
        "issues": [
            {
                "key": "issue1",
                "rule": "python:S1481",
                "severity": "MAJOR",
                "component": f"{MOCK_PROJECT_KEY}:src/program.py",
                "line": 42,
                "message": "Remove this unused variable",
                "type": "CODE_SMELL",
            },
            {
                "key": "issue2",
                "rule": "python:S3776",
                "severity": "MINOR",
                "component": f"{MOCK_PROJECT_KEY}:src/helper.py",
                "line": 15,
                "message": "Refactor this method to reduce complexity",
                "type": "CODE_SMELL",
            },
        ],
    },
    "/api/hotspots/search": {
        "hotspots": [
            {
                "key": "hot-spot-1",
                "component": f"{MOCK_PROJECT_KEY}:src/database.py",
                "line": 88,
                "message": "Make sure using this SQL query is safe",
                "securityCategory": "sql-injection",
                "vulnerabilityProbability": "HIGH",
            },
        ],
    },
    "/api/metrics/search": {
        "metrics": [
            {"key": "new_coverage", "name": "Coverage on New Code"},
            {"key": "new_bugs", "name": "New Bugs"},
        ],
    },
}


@dataclass
class ValidationOutcome:
    name: str
    passed: bool
    error_message: Optional[str] = None


def mock_server_handler(request: httpx.Request) -> httpx.Response:
    """Serve canned SonarQube responses keyed by request path."""
    body = _MOCK_RESPONSES.get(request.url.path)
    if body is None:
        return httpx.Response(404, json={"errors": [{"msg": "Unknown url"}]})
    return httpx.Response(200, json=body)


def mock_client_factory(token: Optional[str]) -> SonarQubeClient:
    return SonarQubeClient(
        token=token, transport=httpx.MockTransport(mock_server_handler)
    )


def run_validation(context: Context) -> None:
    """Run all self-validation checks and write the summary."""
    print_validation_header(context)

    outcomes = [
        _run_check(
            context,
            "Quality Gate Retrieval Test",
            None,
            _check_quality_gate,
        ),
        _run_check(
            context,
            "Issues Retrieval Test",
            None,
            _check_issues,
        ),
        _run_check(
            context,
            "Hot-Spots Retrieval Test",
            None,
            _check_hot_spots,
        ),
        _run_check(
            context,
            "Markdown Report Generation Test",
            "quality-report.md",
            _check_report,
        ),
    ]

    passed = sum(1 for outcome in outcomes if outcome.passed)
    failed = len(outcomes) - passed

    context.write_line("")
    context.write_line(f"Total Tests: {len(outcomes)}")
    context.write_line(f"Passed: {passed}")
    if failed > 0:
        context.write_error(f"Failed: {failed}")
    else:
        context.write_line(f"Failed: {failed}")


def print_validation_header(context: Context) -> None:
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    rows = [
        ("SonarMark Version", __version__),
        ("Machine Name", platform.node()),
        ("OS Version", platform.platform()),
        ("Python Runtime", f"{platform.python_implementation()} {platform.python_version()}"),
        ("Time Stamp", timestamp),
    ]

    context.write_line("# SonarMark Self-Validation")
    context.write_line("")
    context.write_line(f"| {'Information':<19} | {'Value':<50} |")
    context.write_line(f"| :{'-' * 18} | :{'-' * 49} |")
    for label, value in rows:
        context.write_line(f"| {label:<19} | {value:<50} |")
    context.write_line("")


def _check_quality_gate(log: str, _report: Optional[str]) -> Optional[str]:
    expected = ("Quality Gate Status: ERROR", "Issues: 2", "Hot-Spots: 1")
    if all(text in log for text in expected):
        return None
    return "Expected output not found in log"


def _check_issues(log: str, _report: Optional[str]) -> Optional[str]:
    if "Issues: 2" in log:
        return None
    return "Expected issues count not found in log"


def _check_hot_spots(log: str, _report: Optional[str]) -> Optional[str]:
    if "Hot-Spots: 1" in log:
        return None
    return "Expected hot-spots count not found in log"


def _check_report(_log: str, report: Optional[str]) -> Optional[str]:
    if report is None:
        return "Report file not created"

    expected = (
        MOCK_PROJECT_NAME,
        "**Quality Gate Status:** ERROR",
        "Found 2 issues",
        "Found 1 security hot-spot",
    )
    if all(text in report for text in expected):
        return None
    return "Report file missing expected content"


def _run_check(
    context: Context,
    display_name: str,
    report_file_name: Optional[str],
    validator: Validator,
) -> ValidationOutcome:
    try:
        with tempfile.TemporaryDirectory(prefix="sonarmark_validation_") as temp_dir:
            log_file = Path(temp_dir) / "validation.log"
            report_file = (
                Path(temp_dir) / report_file_name if report_file_name else None
            )
            options = RunOptions(
                silent=True,
                log_file=log_file,
                server=MOCK_SERVER_URL,
                project_key=MOCK_PROJECT_KEY,
                report_file=report_file,
            )

            with Context(options, client_factory=mock_client_factory) as check_context:
                print_banner(check_context)
                process_sonar_analysis(check_context)
                exit_code = check_context.exit_code

            if exit_code != 0:
                error_message = f"Exit code {exit_code}"
            else:
                log = log_file.read_text(encoding="utf-8")
                report = (
                    report_file.read_text(encoding="utf-8")
                    if report_file is not None and report_file.exists()
                    else None
                )
                error_message = validator(log, report)
    except Exception as e:
        logger.exception(f"Self-validation check '{display_name}' raised")
        error_message = f"Exception: {e}"

    outcome = ValidationOutcome(
        name=display_name,
        passed=error_message is None,
        error_message=error_message,
    )

    if outcome.passed:
        context.write_line(f"✓ {display_name} - PASSED")
    else:
        context.write_error(f"✗ {display_name} - FAILED: {error_message}")
    return outcome
