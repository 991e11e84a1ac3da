"""CLI run configuration and output sink.

RunOptions is the immutable configuration built from command-line flags.
Context wraps it with the line-oriented output used by the runner:
``write_line`` for progress, ``write_error`` for failures. Any call to
``write_error`` makes the process exit with status 1.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Optional

from rich.console import Console

from sonarmark.client import SonarQubeClient
from sonarmark.errors import ValidationError

# Console instances for stdout and stderr
console = Console()
error_console = Console(stderr=True)

ClientFactory = Callable[[Optional[str]], SonarQubeClient]


@dataclass(frozen=True)
class RunOptions:
    """Immutable configuration for one SonarMark invocation.

    Attributes:
        silent: Suppress console output (the log file is still written)
        validate: Run self-validation instead of querying a server
        enforce: Report a failure when the quality gate status is ERROR
        log_file: File that mirrors every output line
        working_directory: Directory searched for report-task.txt
        token: Personal access token for the server
        server: Server URL (direct-query mode)
        project_key: Project key (direct-query mode)
        branch: Branch name (direct-query mode)
        report_file: Markdown report destination
        report_depth: Heading depth of the report title (1-6)
        verbose: Enable debug logging
    """

    silent: bool = False
    validate: bool = False
    enforce: bool = False
    log_file: Optional[Path] = None
    working_directory: Optional[Path] = None
    token: Optional[str] = None
    server: Optional[str] = None
    project_key: Optional[str] = None
    branch: Optional[str] = None
    report_file: Optional[Path] = None
    report_depth: int = 1
    verbose: bool = False

    @property
    def direct_query(self) -> bool:
        """True when the server and project are given on the command line."""
        return self.server is not None or self.project_key is not None


def default_client_factory(token: Optional[str]) -> SonarQubeClient:
    return SonarQubeClient(token=token)


class Context:
    """Output sink and error state for one invocation.

    Usage:
        with Context(options) as context:
            run(context)
        raise typer.Exit(context.exit_code)

    Attributes:
        options: Immutable run configuration
    """

    def __init__(
        self,
        options: RunOptions,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        """Create the context, opening the log file if one is configured.

        Args:
            options: Run configuration
            client_factory: Builds a server client from a token (defaults to
                a real SonarQubeClient)

        Raises:
            ValidationError: If the log file cannot be opened
        """
        self.options = options
        self._client_factory = client_factory or default_client_factory
        self._has_errors = False
        self._log_writer: Optional[IO[str]] = None

        if options.log_file is not None:
            try:
                self._log_writer = open(options.log_file, "w", encoding="utf-8")
            except OSError as e:
                raise ValidationError(
                    message=f"Failed to open log file '{options.log_file}': {e}",
                    error_code="INPUT-LogFile",
                    details={"log_file": str(options.log_file)},
                ) from e

    def __enter__(self) -> "Context":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    @property
    def has_errors(self) -> bool:
        return self._has_errors

    @property
    def exit_code(self) -> int:
        return 1 if self._has_errors else 0

    def create_client(self) -> SonarQubeClient:
        """Create a server client using the configured token."""
        return self._client_factory(self.options.token)

    def write_line(self, message: str) -> None:
        """Write a progress line to the console and the log file."""
        if not self.options.silent:
            console.print(message, markup=False, highlight=False, soft_wrap=True)
        self._log(message)

    def write_error(self, message: str) -> None:
        """Write an error line and mark the invocation as failed."""
        self._has_errors = True
        if not self.options.silent:
            error_console.print(
                message, style="red", markup=False, highlight=False, soft_wrap=True
            )
        self._log(message)

    def _log(self, message: str) -> None:
        if self._log_writer is not None:
            self._log_writer.write(f"{message}\n")
            self._log_writer.flush()

    def close(self) -> None:
        """Close the log file if one is open."""
        if self._log_writer is not None:
            self._log_writer.close()
            self._log_writer = None
