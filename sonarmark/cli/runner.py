"""Orchestration of a SonarMark run.

Sequence: pick the retrieval mode, fetch the analysis result, report the
summary, apply quality gate enforcement and write the markdown report.
Expected failures (bad input, server or task state, report I/O) are
written through ``Context.write_error`` and never escape as exceptions.
"""

import asyncio
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Optional

from sonarmark.cli.context import Context
from sonarmark.client import SonarQubeClient
from sonarmark.errors import OperationError, ValidationError
from sonarmark.logging import get_logger
from sonarmark.models import AnalysisResult
from sonarmark.report_task import (
    REPORT_TASK_FILE_NAME,
    TaskDescriptor,
    find_report_task,
    parse_report_task,
)
from sonarmark.version import __version__

logger = get_logger(__name__)

QUALITY_GATE_FAILED_STATUS = "ERROR"

Fetch = Callable[[SonarQubeClient], Awaitable[AnalysisResult]]


def print_banner(context: Context) -> None:
    context.write_line(f"SonarMark version {__version__}")
    context.write_line("")


def run(context: Context) -> None:
    """Run SonarMark for a prepared context.

    Self-validation takes priority over server processing.
    """
    print_banner(context)

    if context.options.validate:
        from sonarmark.cli.validation import run_validation

        run_validation(context)
        return

    process_sonar_analysis(context)


def process_sonar_analysis(context: Context) -> None:
    """Fetch analysis results and produce the requested outputs."""
    options = context.options

    fetch: Optional[Fetch]
    if options.direct_query:
        fetch = _direct_query(context)
    else:
        fetch = _local_task_query(context)
    if fetch is None:
        return

    context.write_line("Fetching quality results from server...")
    try:
        result = asyncio.run(_fetch_with_client(context, fetch))
    except (ValidationError, OperationError) as e:
        context.write_error(f"Error: Failed to get quality results: {e}")
        return
    except Exception as e:
        logger.exception("Unexpected error while fetching quality results")
        context.write_error(f"Unexpected error: {e}")
        raise

    context.write_line(f"Quality Gate Status: {result.quality_gate_status}")
    context.write_line(f"Issues: {len(result.issues)}")
    context.write_line(f"Hot-Spots: {len(result.hot_spots)}")

    if options.enforce and result.quality_gate_status == QUALITY_GATE_FAILED_STATUS:
        context.write_error("Error: Quality gate failed")

    if options.report_file is not None:
        write_report(context, result, options.report_file)


def write_report(context: Context, result: AnalysisResult, report_file: Path) -> None:
    """Render the markdown report and write it to a file."""
    context.write_line(f"Writing quality report to {report_file}...")
    try:
        markdown = result.to_markdown(context.options.report_depth)
        Path(report_file).write_text(markdown, encoding="utf-8")
    except (OSError, ValidationError) as e:
        context.write_error(f"Error: Failed to write report: {e}")
        return
    context.write_line("Quality report generated successfully.")


def _direct_query(context: Context) -> Optional[Fetch]:
    options = context.options
    if not options.server:
        context.write_error("Error: --server parameter is required")
        return None
    if not options.project_key:
        context.write_error("Error: --project-key parameter is required")
        return None

    server = options.server
    project_key = options.project_key
    branch = options.branch

    if branch:
        context.write_line(f"Project: {project_key} (branch {branch})")
    else:
        context.write_line(f"Project: {project_key}")
    context.write_line(f"Server: {server}")

    def fetch(client: SonarQubeClient) -> Awaitable[AnalysisResult]:
        return client.fetch_by_branch(server, project_key, branch)

    return fetch


def _local_task_query(context: Context) -> Optional[Fetch]:
    working_directory = context.options.working_directory or Path(os.getcwd())

    context.write_line(
        f"Searching for {REPORT_TASK_FILE_NAME} in {working_directory}..."
    )
    report_task_file = find_report_task(working_directory)
    if report_task_file is None:
        context.write_error(
            f"Error: Could not find {REPORT_TASK_FILE_NAME} in {working_directory}"
        )
        return None

    context.write_line(f"Found {REPORT_TASK_FILE_NAME} at {report_task_file}")

    try:
        descriptor: TaskDescriptor = parse_report_task(report_task_file)
    except ValidationError as e:
        context.write_error(f"Error: Failed to parse {REPORT_TASK_FILE_NAME}: {e}")
        return None

    context.write_line(f"Project: {descriptor.project_key}")
    context.write_line(f"Server: {descriptor.server_url}")
    context.write_line(f"Task ID: {descriptor.ce_task_id}")

    def fetch(client: SonarQubeClient) -> Awaitable[AnalysisResult]:
        return client.fetch_quality_result(descriptor)

    return fetch


async def _fetch_with_client(context: Context, fetch: Fetch) -> AnalysisResult:
    async with context.create_client() as client:
        return await fetch(client)
