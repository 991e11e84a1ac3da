"""Core shared logic for the server client.

This module contains pure functions shared by the fetch paths of
SonarQubeClient: authentication plus response and JSON payload
parsing. Structural wrapper keys are required; leaf fields inside
array elements fall back to empty values so that optional schema drift on
the server does not fail a whole fetch.
"""

from typing import Any, Optional

import httpx

from sonarmark.client.errors import APIError
from sonarmark.errors import ResponseFormatError


def build_auth(token: Optional[str]) -> Optional[httpx.BasicAuth]:
    """Build request authentication for a SonarQube token.

    SonarQube expects HTTP Basic authentication with the token as the
    username and an empty password.

    Args:
        token: Personal access token, or None/blank for anonymous access

    Returns:
        BasicAuth instance, or None when no token is supplied
    """
    if token is None or not token.strip():
        return None
    return httpx.BasicAuth(username=token, password="")


def parse_response(response: httpx.Response) -> Any:
    """Parse HTTP response, extracting JSON and handling errors.

    Args:
        response: httpx Response object

    Returns:
        Parsed JSON body

    Raises:
        APIError: For non-2xx responses or JSON parsing failures
    """
    request = response.request
    path = request.url.path

    if not response.is_success:
        reason = response.reason_phrase or "Error"
        raise APIError(
            message=f"Request to {path} failed with HTTP {response.status_code} ({reason})",
            status_code=response.status_code,
            details={
                "url": str(request.url),
                "response_text": response.text[:500] if response.text else "",
            },
        )

    try:
        return response.json()
    except ValueError as e:
        raise APIError(
            message=f"Invalid JSON response from {path}",
            status_code=response.status_code,
            details={
                "error": str(e),
                "response_text": response.text[:500] if response.text else "",
            },
        ) from e


def require_object(data: Any, key: str, source: str) -> dict[str, Any]:
    """Get a required JSON object property.

    Args:
        data: Parsed JSON value expected to be an object
        key: Property name
        source: Short description of the response, used in error messages

    Raises:
        ResponseFormatError: If the property is missing or not an object
    """
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, dict):
        raise ResponseFormatError(
            message=f"Invalid {source} response: missing '{key}' property",
            error_code="REMOTE-MissingProperty",
            details={"property": key, "source": source},
        )
    return value


def require_list(data: Any, key: str, source: str) -> list[dict[str, Any]]:
    """Get a required JSON array property, keeping only object elements.

    Raises:
        ResponseFormatError: If the property is missing or not an array
    """
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, list):
        raise ResponseFormatError(
            message=f"Invalid {source} response: missing '{key}' property",
            error_code="REMOTE-MissingProperty",
            details={"property": key, "source": source},
        )
    return [item for item in value if isinstance(item, dict)]


def optional_list(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """Get an optional JSON array property, empty when absent."""
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    """Get an optional string property; numbers are converted to text."""
    value = data.get(key)
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def string_or_empty(data: dict[str, Any], key: str) -> str:
    """Get a string property, defaulting to an empty string."""
    value = optional_str(data, key)
    return value if value is not None else ""


def optional_int(data: dict[str, Any], key: str) -> Optional[int]:
    """Get an optional integer property (e.g. a line number)."""
    value = data.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None
