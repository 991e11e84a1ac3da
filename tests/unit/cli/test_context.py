"""Tests for RunOptions and the CLI output context."""

from pathlib import Path

import pytest

from sonarmark.cli.context import Context, RunOptions
from sonarmark.errors import ValidationError


class TestRunOptions:
    def test_defaults(self):
        options = RunOptions()

        assert options.report_depth == 1
        assert options.log_file is None
        assert not options.direct_query

    @pytest.mark.parametrize(
        "kwargs",
        [{"server": "https://s"}, {"project_key": "p"}, {"server": "", "project_key": "p"}],
    )
    def test_direct_query_when_server_or_project_given(self, kwargs):
        assert RunOptions(**kwargs).direct_query

    def test_is_immutable(self):
        options = RunOptions()
        with pytest.raises(AttributeError):
            options.silent = True  # type: ignore[misc]


class TestContext:
    """Tests for Context output and error tracking."""

    def test_write_line_goes_to_stdout(self, capsys):
        with Context(RunOptions()) as context:
            context.write_line("Quality Gate Status: OK [sql-injection]")

        captured = capsys.readouterr()
        assert captured.out == "Quality Gate Status: OK [sql-injection]\n"
        assert context.exit_code == 0
        assert not context.has_errors

    def test_write_error_goes_to_stderr_and_sets_exit_code(self, capsys):
        with Context(RunOptions()) as context:
            context.write_error("Error: something broke")

        captured = capsys.readouterr()
        assert "Error: something broke" in captured.err
        assert captured.out == ""
        assert context.has_errors
        assert context.exit_code == 1

    def test_silent_suppresses_console(self, capsys):
        with Context(RunOptions(silent=True)) as context:
            context.write_line("hello")
            context.write_error("oops")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
        assert context.exit_code == 1

    def test_log_file_mirrors_all_lines(self, tmp_path: Path, capsys):
        log_file = tmp_path / "run.log"

        with Context(RunOptions(silent=True, log_file=log_file)) as context:
            context.write_line("first")
            context.write_error("second")
            context.write_line("")

        assert log_file.read_text(encoding="utf-8") == "first\nsecond\n\n"

    def test_log_file_is_truncated(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        log_file.write_text("stale content\n", encoding="utf-8")

        with Context(RunOptions(silent=True, log_file=log_file)) as context:
            context.write_line("fresh")

        assert log_file.read_text(encoding="utf-8") == "fresh\n"

    def test_unopenable_log_file(self, tmp_path: Path):
        log_file = tmp_path / "no-such-dir" / "run.log"

        with pytest.raises(ValidationError, match="Failed to open log file"):
            Context(RunOptions(log_file=log_file))

    def test_close_is_idempotent(self, tmp_path: Path):
        context = Context(RunOptions(log_file=tmp_path / "run.log"))

        context.close()
        context.close()
        context.write_line("after close is console only")

    def test_create_client_passes_token(self):
        tokens = []
        client = object()

        def factory(token):
            tokens.append(token)
            return client

        context = Context(RunOptions(token="squ_abc"), client_factory=factory)

        assert context.create_client() is client
        assert tokens == ["squ_abc"]
