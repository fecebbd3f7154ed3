"""Tests for the root CLI application."""

import logging

from typer.testing import CliRunner

from jscall import __version__
from jscall.cli.exit_codes import ExitCode
from jscall.main import _setup_logging, app

runner = CliRunner()


class TestRootApp:
    """Test global options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_command_groups(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "mailbox" in result.output
        assert "config" in result.output

    def test_quiet_conflicts_with_verbose(self, page_file) -> None:
        result = runner.invoke(app, ["--quiet", "--verbose", "mailbox", "check", str(page_file())])
        assert result.exit_code == ExitCode.INVALID_ARGUMENT

    def test_log_file(self, page_file, tmp_path) -> None:
        log_file = tmp_path / "logs" / "jscall.log"
        result = runner.invoke(app, ["--log-file", str(log_file), "mailbox", "check", str(page_file())])

        assert result.exit_code == 0
        assert "Found <jscall> anchor" in log_file.read_text()


class TestSetupLogging:
    """Test _setup_logging."""

    def teardown_method(self) -> None:
        _setup_logging()

    def test_default_level(self) -> None:
        _setup_logging()
        assert logging.getLogger().getEffectiveLevel() == logging.WARNING

    def test_configured_level(self) -> None:
        _setup_logging(default_level="info")
        assert logging.getLogger().level == logging.INFO

    def test_invalid_configured_level(self) -> None:
        _setup_logging(default_level="LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_debug_wins(self) -> None:
        _setup_logging(verbose=True, debug=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet(self) -> None:
        _setup_logging(quiet=True)
        assert logging.getLogger().level == logging.ERROR
