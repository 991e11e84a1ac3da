"""Shared fixtures for SonarMark unit tests."""

from collections.abc import Callable
from typing import Any, Optional, Union

import httpx
import pytest

from sonarmark.client import SonarQubeClient
from sonarmark.config import ClientSettings, clear_settings_cache

MOCK_PROJECT_KEY = "MockProj"
MOCK_PROJECT_NAME = "Mock Project"

ResponseEntry = Union[
    dict[str, Any], httpx.Response, Callable[[httpx.Request], httpx.Response]
]


def default_responses() -> dict[str, ResponseEntry]:
    """Canned responses for a project with a failing quality gate."""
    return {
        "/api/components/show": {
            "component": {"key": MOCK_PROJECT_KEY, "name": MOCK_PROJECT_NAME}
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
            }
        },
        "/api/metrics/search": {
            "metrics": [
                {"key": "new_coverage", "name": "Coverage on New Code"},
                {"key": "new_bugs", "name": "New Bugs"},
            ]
        },
        "/api/issues/search": {
            "issues": [
                {
                    "key": "issue1",
                    "rule": "python:S1481",
                    "severity": "MAJOR",
                    "component": f"{MOCK_PROJECT_KEY}:src/Foo.cs",
                    "line": 42,
                    "message": "Remove this unused variable",
                    "type": "CODE_SMELL",
                },
                {
                    "key": "issue2",
                    "rule": "python:S3776",
                    "severity": "MINOR",
                    "component": f"{MOCK_PROJECT_KEY}:src/Bar.cs",
                    "line": 15,
                    "message": "Refactor this method to reduce complexity",
                    "type": "CODE_SMELL",
                },
            ]
        },
        "/api/hotspots/search": {
            "hotspots": [
                {
                    "key": "hot-spot-1",
                    "component": f"{MOCK_PROJECT_KEY}:src/Db.cs",
                    "line": 88,
                    "message": "Make sure using this SQL query is safe",
                    "securityCategory": "sql-injection",
                    "vulnerabilityProbability": "HIGH",
                }
            ]
        },
        "/api/ce/task": {
            "task": {"id": "task123", "status": "SUCCESS", "analysisId": "analysis456"}
        },
    }


class MockSonarServer:
    """In-process SonarQube server backed by httpx.MockTransport.

    Responses are keyed by URL path. An entry can be a JSON body, a ready
    httpx.Response, or a callable receiving the request. Unknown paths get
    a 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.responses: dict[str, ResponseEntry] = default_responses()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        entry = self.responses.get(request.url.path)
        if entry is None:
            return httpx.Response(404, json={"errors": [{"msg": "Unknown url"}]})
        if isinstance(entry, httpx.Response):
            return entry
        if callable(entry):
            return entry(request)
        return httpx.Response(200, json=entry)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())

    def client_factory(
        self, settings: Optional[ClientSettings] = None
    ) -> Callable[[Optional[str]], SonarQubeClient]:
        def factory(token: Optional[str]) -> SonarQubeClient:
            return SonarQubeClient(
                token=token, settings=settings, transport=self.transport()
            )

        return factory

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]


@pytest.fixture
def mock_server() -> MockSonarServer:
    """A fresh mock server with a failing-quality-gate project."""
    return MockSonarServer()


@pytest.fixture
def fast_settings() -> ClientSettings:
    """Client settings with short polling for tests."""
    return ClientSettings(request_timeout=5.0, poll_timeout=5.0, poll_interval=0.01)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Keep environment-driven settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()

