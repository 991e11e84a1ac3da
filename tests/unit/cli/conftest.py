"""Shared fixtures for CLI tests."""

import logging
import re
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from sonarmark.logging import set_debug_mode

if TYPE_CHECKING:
    from typer.testing import Result

# ANSI escape code pattern for stripping styling from output
ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


class CleanResult:
    """Result wrapper that strips ANSI codes from the captured output.

    Rich applies bold/dim styling to help text even with NO_COLOR=1, which
    breaks plain string assertions on option names.
    """

    def __init__(self, result: "Result") -> None:
        self._result = result

    @property
    def exit_code(self) -> int:
        return self._result.exit_code

    @property
    def output(self) -> str:
        """The terminal output (stdout and stderr) with ANSI codes stripped."""
        return ANSI_ESCAPE_PATTERN.sub("", self._result.output)

    @property
    def exception(self):
        return self._result.exception


class CleanCliRunner(CliRunner):
    """CLI runner that returns results with ANSI codes stripped."""

    def invoke(self, *args, **kwargs) -> CleanResult:
        result = super().invoke(*args, **kwargs)
        return CleanResult(result)


@pytest.fixture
def runner():
    """CLI runner with colors disabled and ANSI codes stripped."""
    return CleanCliRunner(env={"NO_COLOR": "1"})


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes made by configure_logging.

    The CLI attaches a stderr handler bound to the runner's temporary
    stream; it must not outlive the test.
    """
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    set_debug_mode(False)
    logging.getLogger("sonarmark").setLevel(logging.NOTSET)
