"""Asynchronous client for SonarQube/SonarCloud web APIs.

This module provides SonarQubeClient, which reads analysis results from a
server using httpx.AsyncClient. Two retrieval modes are supported:

- By project key and branch (``fetch_by_branch``): reads the latest
  analysis of a branch directly.
- By compute-engine task (``fetch_quality_result``): polls the task named
  in a report-task.txt file until the server has processed the analysis,
  then reads that analysis.

Both modes fetch the quality gate, project name, metric names, issues and
hot-spots concurrently and treat them as one unit: if any request fails
the others are cancelled and no partial result is returned.
"""

import asyncio
import time
from collections.abc import Awaitable
from typing import Any, Optional

import httpx

from sonarmark.client.core import (
    build_auth,
    optional_int,
    optional_list,
    optional_str,
    parse_response,
    require_list,
    require_object,
    string_or_empty,
)
from sonarmark.client.errors import APIError, ClientError, ConnectionError, TimeoutError
from sonarmark.config import ClientSettings, get_client_settings
from sonarmark.errors import (
    MissingAnalysisError,
    ResponseFormatError,
    TaskCanceledError,
    TaskFailedError,
    TaskTimeoutError,
    ValidationError,
)
from sonarmark.logging import get_logger
from sonarmark.models import (
    AnalysisResult,
    HotSpot,
    Issue,
    QualityCondition,
    TaskResult,
    TaskStatus,
)
from sonarmark.report_task import TaskDescriptor

logger = get_logger(__name__)

# Server-side page size for issues and hot-spots; results beyond the first
# page are not fetched.
PAGE_SIZE = 500

ISSUE_STATUSES = "OPEN,CONFIRMED"


class SonarQubeClient:
    """Asynchronous client for SonarQube/SonarCloud analysis results.

    The client either owns its httpx.AsyncClient (created from the token
    and settings) or borrows one supplied by the caller. Only an owned
    transport is closed by ``aclose``.

    Usage:
        async with SonarQubeClient(token="squ_...") as client:
            result = await client.fetch_by_branch(
                "https://sonarcloud.io", "my-project", branch="main"
            )

    Attributes:
        settings: Request timeout and polling defaults
    """

    def __init__(
        self,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Optional personal access token; ignored when http_client is given
            http_client: HTTP client to borrow instead of creating one
            settings: Client settings (defaults to environment-driven settings)
            transport: Transport for the owned HTTP client (e.g. httpx.MockTransport)
        """
        self.settings = settings or get_client_settings()
        if http_client is None:
            self._http_client = httpx.AsyncClient(
                auth=build_auth(token),
                timeout=self.settings.request_timeout,
                transport=transport,
            )
            self._owns_http_client = True
        else:
            self._http_client = http_client
            self._owns_http_client = False

    @property
    def owns_http_client(self) -> bool:
        return self._owns_http_client

    async def __aenter__(self) -> "SonarQubeClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP transport if this instance owns it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def _get(
        self,
        server_url: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make a GET request against a server and return the parsed JSON.

        Raises:
            ConnectionError: Cannot connect to server
            TimeoutError: Request exceeded timeout
            APIError: Server returned an error response or invalid JSON
            ClientError: Any other transport failure
        """
        url = f"{server_url.rstrip('/')}{path}"
        logger.debug(f"GET {url} params={params}")

        try:
            response = await self._http_client.get(url, params=params)
        except httpx.ConnectError as e:
            raise ConnectionError(
                message=f"Could not connect to server at {url}",
                details={"url": url, "error": str(e)},
            ) from e
        except httpx.TimeoutException as e:
            raise TimeoutError(
                message=f"Request to {url} timed out",
                details={"url": url, "error": str(e)},
            ) from e
        except httpx.InvalidURL as e:
            raise ClientError(
                message=f"Invalid server URL: {url}",
                details={"url": url, "error": str(e)},
            ) from e
        except httpx.HTTPError as e:
            raise ClientError(
                message=f"Request to {url} failed: {e}",
                details={"url": url, "error": str(e)},
            ) from e

        return parse_response(response)

    # --- Compute-engine task polling ---

    async def get_task_status(self, descriptor: TaskDescriptor) -> TaskResult:
        """Read the current status of the descriptor's compute-engine task.

        Raises:
            ResponseFormatError: If the response lacks task/status or the
                status is not recognised
        """
        data = await self._get(
            descriptor.server_url, "/api/ce/task", {"id": descriptor.ce_task_id}
        )
        task = require_object(data, "task", "CE task")

        status_text = optional_str(task, "status")
        if status_text is None:
            raise ResponseFormatError(
                message="Invalid CE task response: missing 'status' property",
                error_code="REMOTE-MissingProperty",
                details={"property": "status", "source": "CE task"},
            )
        status = TaskStatus.parse(status_text)

        analysis_id = None
        if status is TaskStatus.SUCCESS:
            analysis_id = optional_str(task, "analysisId")

        return TaskResult(status=status, analysis_id=analysis_id)

    async def await_task(
        self,
        descriptor: TaskDescriptor,
        poll_timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> TaskResult:
        """Poll a compute-engine task until it reaches a terminal state.

        Args:
            descriptor: Report task naming the server and task id
            poll_timeout: Maximum seconds to wait (default from settings)
            poll_interval: Seconds between polls (default from settings)

        Returns:
            The successful task result

        Raises:
            ValidationError: If poll_timeout or poll_interval is not positive
            TaskFailedError: If the task failed
            TaskCanceledError: If the task was canceled
            TaskTimeoutError: If the task did not finish within poll_timeout
        """
        timeout = self.settings.poll_timeout if poll_timeout is None else poll_timeout
        interval = (
            self.settings.poll_interval if poll_interval is None else poll_interval
        )
        if timeout <= 0:
            raise ValidationError(
                message="Polling timeout must be positive",
                error_code="INPUT-InvalidPollTimeout",
                details={"poll_timeout": timeout},
            )
        if interval <= 0:
            raise ValidationError(
                message="Polling interval must be positive",
                error_code="INPUT-InvalidPollInterval",
                details={"poll_interval": interval},
            )

        task_id = descriptor.ce_task_id
        deadline = time.monotonic() + timeout

        while True:
            if time.monotonic() >= deadline:
                raise TaskTimeoutError(
                    message=(
                        f"Timed out waiting for task {task_id} to complete "
                        f"after {timeout:g} seconds"
                    ),
                    error_code="REMOTE-TaskTimeout",
                    details={"task_id": task_id, "poll_timeout": timeout},
                )

            result = await self.get_task_status(descriptor)
            logger.debug(f"Task {task_id} status: {result.status.value}")

            if result.status is TaskStatus.SUCCESS:
                return result
            if result.status is TaskStatus.FAILED:
                raise TaskFailedError(
                    message=f"Task {task_id} failed",
                    error_code="REMOTE-TaskFailed",
                    details={"task_id": task_id},
                )
            if result.status is TaskStatus.CANCELED:
                raise TaskCanceledError(
                    message=f"Task {task_id} was canceled",
                    error_code="REMOTE-TaskCanceled",
                    details={"task_id": task_id},
                )

            remaining = deadline - time.monotonic()
            await asyncio.sleep(max(0.0, min(interval, remaining)))

    async def fetch_quality_result(
        self,
        descriptor: TaskDescriptor,
        poll_timeout: Optional[float] = None,
    ) -> AnalysisResult:
        """Wait for a report task's analysis and fetch its results.

        The quality gate is read for the task's analysis id; project name,
        metric names, issues and hot-spots are read for the project key.

        Raises:
            MissingAnalysisError: If the task succeeded without an analysis id
        """
        task_result = await self.await_task(descriptor, poll_timeout=poll_timeout)
        if not task_result.analysis_id:
            raise MissingAnalysisError(
                message=f"Task {descriptor.ce_task_id} completed without an analysis id",
                error_code="REMOTE-MissingAnalysisId",
                details={"task_id": descriptor.ce_task_id},
            )

        return await self._fetch_result(
            descriptor.server_url,
            descriptor.project_key,
            quality_gate_params={"analysisId": task_result.analysis_id},
            branch=None,
        )

    # --- Direct query by project key and branch ---

    async def fetch_by_branch(
        self,
        server_url: str,
        project_key: str,
        branch: Optional[str] = None,
    ) -> AnalysisResult:
        """Fetch the latest analysis results of a project branch.

        Args:
            server_url: Base URL of the server
            project_key: Server-side project key
            branch: Branch name, or None for the main branch

        Returns:
            The combined analysis result
        """
        params: dict[str, Any] = {"projectKey": project_key}
        if branch:
            params["branch"] = branch

        return await self._fetch_result(
            server_url,
            project_key,
            quality_gate_params=params,
            branch=branch,
        )

    async def _fetch_result(
        self,
        server_url: str,
        project_key: str,
        quality_gate_params: dict[str, Any],
        branch: Optional[str],
    ) -> AnalysisResult:
        (
            project_name,
            (gate_status, conditions),
            metric_names,
            issues,
            hot_spots,
        ) = await _gather_all(
            self.get_project_name(server_url, project_key),
            self.get_quality_gate(server_url, quality_gate_params),
            self.get_metric_names(server_url),
            self.get_issues(server_url, project_key, branch),
            self.get_hot_spots(server_url, project_key, branch),
        )

        return AnalysisResult(
            server_url=server_url,
            project_key=project_key,
            project_name=project_name,
            quality_gate_status=gate_status,
            conditions=conditions,
            metric_names=metric_names,
            issues=issues,
            hot_spots=hot_spots,
        )

    async def get_project_name(self, server_url: str, project_key: str) -> str:
        """Get the display name of a project, falling back to its key."""
        try:
            data = await self._get(
                server_url, "/api/components/show", {"component": project_key}
            )
        except APIError as e:
            if e.status_code != 404:
                raise
            logger.warning(f"Project {project_key} not found, using key as name")
            return project_key

        component = data.get("component") if isinstance(data, dict) else None
        name = optional_str(component, "name") if isinstance(component, dict) else None
        if not name or not name.strip():
            logger.warning(f"No display name for project {project_key}, using key")
            return project_key
        return name

    async def get_quality_gate(
        self, server_url: str, params: dict[str, Any]
    ) -> tuple[str, list[QualityCondition]]:
        """Get the quality gate status and its conditions.

        Args:
            server_url: Base URL of the server
            params: Either projectKey (and optional branch) or analysisId

        Returns:
            Tuple of (status, conditions in server order)
        """
        data = await self._get(server_url, "/api/qualitygates/project_status", params)
        project_status = require_object(data, "projectStatus", "quality gate")

        status = optional_str(project_status, "status") or "NONE"
        conditions = [
            QualityCondition(
                metric=string_or_empty(item, "metricKey"),
                comparator=string_or_empty(item, "comparator"),
                error_threshold=optional_str(item, "errorThreshold"),
                actual_value=optional_str(item, "actualValue"),
                status=string_or_empty(item, "status"),
            )
            for item in optional_list(project_status, "conditions")
        ]
        return status, conditions

    async def get_metric_names(self, server_url: str) -> dict[str, str]:
        """Get the metric key to friendly name dictionary."""
        data = await self._get(server_url, "/api/metrics/search")

        names: dict[str, str] = {}
        for item in require_list(data, "metrics", "metrics"):
            key = optional_str(item, "key")
            name = optional_str(item, "name")
            if key and name:
                names[key] = name
        return names

    async def get_issues(
        self, server_url: str, project_key: str, branch: Optional[str] = None
    ) -> list[Issue]:
        """Get open and confirmed issues (first page only)."""
        params: dict[str, Any] = {
            "componentKeys": project_key,
            "issueStatuses": ISSUE_STATUSES,
            "ps": PAGE_SIZE,
        }
        if branch:
            params["branch"] = branch

        data = await self._get(server_url, "/api/issues/search", params)
        return [
            Issue(
                key=string_or_empty(item, "key"),
                rule=string_or_empty(item, "rule"),
                severity=string_or_empty(item, "severity"),
                component=string_or_empty(item, "component"),
                line=optional_int(item, "line"),
                message=string_or_empty(item, "message"),
                type=string_or_empty(item, "type"),
            )
            for item in require_list(data, "issues", "issues")
        ]

    async def get_hot_spots(
        self, server_url: str, project_key: str, branch: Optional[str] = None
    ) -> list[HotSpot]:
        """Get security hot-spots (first page only)."""
        params: dict[str, Any] = {"projectKey": project_key, "ps": PAGE_SIZE}
        if branch:
            params["branch"] = branch

        data = await self._get(server_url, "/api/hotspots/search", params)
        return [
            HotSpot(
                key=string_or_empty(item, "key"),
                component=string_or_empty(item, "component"),
                line=optional_int(item, "line"),
                message=string_or_empty(item, "message"),
                security_category=string_or_empty(item, "securityCategory"),
                vulnerability_probability=string_or_empty(
                    item, "vulnerabilityProbability"
                ),
            )
            for item in require_list(data, "hotspots", "hot-spots")
        ]


async def _gather_all(*awaitables: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently; on the first failure cancel the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
