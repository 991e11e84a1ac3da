"""Report-task descriptor discovery and parsing.

A SonarScanner run leaves a ``report-task.txt`` file behind in its working
directory. It is a plain ``key=value`` file naming the server, the project
and the compute-engine task that is processing the submitted analysis:

    projectKey=my-project
    serverUrl=https://sonarcloud.io
    ceTaskId=AYx1...
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from sonarmark.errors import (
    DescriptorNotFoundError,
    DescriptorUnreadableError,
    MissingFieldError,
)
from sonarmark.logging import get_logger

logger = get_logger(__name__)

REPORT_TASK_FILE_NAME = "report-task.txt"

# Checked in this order; the first missing field is the one reported
REQUIRED_FIELDS = ("projectKey", "serverUrl", "ceTaskId")


@dataclass(frozen=True)
class TaskDescriptor:
    """Identifiers needed to contact the server about one analysis.

    Attributes:
        project_key: Server-side project key
        server_url: Base URL of the SonarQube/SonarCloud server
        ce_task_id: Compute-engine task id of the submitted analysis
    """

    project_key: str
    server_url: str
    ce_task_id: str


def find_report_task(search_directory: Union[str, Path]) -> Optional[Path]:
    """Recursively search a directory for a report-task.txt file.

    Directories are walked top-down with entries in lexicographic order, so
    the result is deterministic for a fixed tree. Subdirectories that cannot
    be read are skipped.

    Args:
        search_directory: Directory to search

    Returns:
        Full path of the first match, or None if the directory does not
        exist or no file was found
    """
    root = Path(search_directory)
    if not root.is_dir():
        return None

    def _skip_unreadable(error: OSError) -> None:
        logger.debug(f"Skipping unreadable directory: {error.filename}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_skip_unreadable):
        dirnames.sort()
        if REPORT_TASK_FILE_NAME in filenames:
            return Path(dirpath) / REPORT_TASK_FILE_NAME

    return None


def parse_report_task(file_path: Union[str, Path]) -> TaskDescriptor:
    """Parse a report-task.txt file.

    Blank lines and ``#`` comments are ignored. Every other line is split on
    its first ``=``; keys and values are trimmed, keys match
    case-insensitively and later duplicates overwrite earlier ones.

    Args:
        file_path: Path to the report-task.txt file

    Returns:
        The parsed descriptor

    Raises:
        DescriptorNotFoundError: If the file does not exist
        DescriptorUnreadableError: If the file cannot be read
        MissingFieldError: If projectKey, serverUrl or ceTaskId is missing or blank
    """
    path = Path(file_path)
    if not path.is_file():
        raise DescriptorNotFoundError(
            message=f"File not found: {path}",
            error_code="INPUT-FileNotFound",
            details={"path": str(path)},
        )

    # Undecodable bytes become U+FFFD instead of failing the whole file
    try:
        with path.open(encoding="utf-8-sig", errors="replace") as f:
            lines = f.readlines()
    except OSError as e:
        raise DescriptorUnreadableError(
            message=f"Unable to read file {path}: {e.strerror or e}",
            error_code="INPUT-FileUnreadable",
            details={"path": str(path), "error": str(e)},
        ) from e

    properties: dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        key, separator, value = stripped.partition("=")
        key = key.strip()
        if not separator or not key:
            continue

        properties[key.lower()] = value.strip()

    values = []
    for field in REQUIRED_FIELDS:
        value = properties.get(field.lower(), "")
        if not value.strip():
            raise MissingFieldError(field, path=str(path))
        values.append(value)

    project_key, server_url, ce_task_id = values
    return TaskDescriptor(
        project_key=project_key,
        server_url=server_url,
        ce_task_id=ce_task_id,
    )
