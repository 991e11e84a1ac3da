"""CLI app entry point.

Provides the Typer app that turns command-line flags into RunOptions,
configures logging, runs SonarMark and maps the outcome to the process
exit status (0 on success, 1 if any error line was written).
"""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError as SettingsValidationError

from sonarmark.cli.context import Context, RunOptions, error_console
from sonarmark.cli.runner import run as run_sonarmark
from sonarmark.config import get_client_settings, get_logging_settings
from sonarmark.errors import SonarMarkError
from sonarmark.logging import configure_logging
from sonarmark.version import __version__

app = typer.Typer(
    name="sonarmark",
    help="SonarMark - SonarQube/SonarCloud analysis results as markdown reports.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.command()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Display version information"
    ),
    silent: bool = typer.Option(False, "--silent", help="Suppress console output"),
    validate: bool = typer.Option(False, "--validate", help="Run self-validation"),
    enforce: bool = typer.Option(
        False,
        "--enforce",
        help="Return non-zero exit code if quality gate fails",
    ),
    log: Optional[Path] = typer.Option(
        None, "--log", help="Write output to log file", dir_okay=False
    ),
    working_directory: Optional[Path] = typer.Option(
        None,
        "--working-directory",
        help="Directory to search for report-task.txt file",
        file_okay=False,
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        help="Personal access token for SonarQube/SonarCloud",
        envvar="SONAR_TOKEN",
        show_envvar=True,
    ),
    server: Optional[str] = typer.Option(
        None, "--server", help="SonarQube/SonarCloud server URL"
    ),
    project_key: Optional[str] = typer.Option(
        None, "--project-key", help="Project key to query"
    ),
    branch: Optional[str] = typer.Option(None, "--branch", help="Branch name to query"),
    report: Optional[Path] = typer.Option(
        None, "--report", help="Export quality results to markdown file", dir_okay=False
    ),
    report_depth: int = typer.Option(
        1,
        "--report-depth",
        min=1,
        max=6,
        help="Markdown header depth for report",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show debug logging on stderr"
    ),
) -> None:
    """Report quality gate status, issues and security hot-spots of a Sonar analysis.

    Without --server/--project-key, the report-task.txt left by a scanner
    run is located under the working directory and its analysis task is
    awaited.

    Examples:
        sonarmark --report quality.md --enforce

        sonarmark --server https://sonarcloud.io --project-key my-proj --branch main
    """
    if version:
        typer.echo(__version__)
        raise typer.Exit()

    try:
        logging_settings = get_logging_settings()
        get_client_settings()
    except SettingsValidationError as e:
        error_console.print(
            f"Error: {format_settings_error(e)}",
            style="red",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        raise typer.Exit(1) from None

    configure_logging(
        console_level=logging_settings.level,
        config={"debug_mode": verbose},
    )

    options = RunOptions(
        silent=silent,
        validate=validate,
        enforce=enforce,
        log_file=log,
        working_directory=working_directory,
        token=token,
        server=server,
        project_key=project_key,
        branch=branch,
        report_file=report,
        report_depth=report_depth,
        verbose=verbose,
    )

    try:
        context = Context(options)
    except SonarMarkError as e:
        error_console.print(
            f"Error: {e}", style="red", markup=False, highlight=False, soft_wrap=True
        )
        raise typer.Exit(1) from None

    with context:
        try:
            run_sonarmark(context)
        except KeyboardInterrupt:
            context.write_error("Error: Operation cancelled")

    raise typer.Exit(context.exit_code)


def format_settings_error(error: SettingsValidationError) -> str:
    """Render a settings validation error as a single line."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    )
    return f"Invalid {error.title} configuration: {problems}"


def run() -> None:
    """Console script entry point."""
    app()
