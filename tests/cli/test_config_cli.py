"""Tests for the config commands."""

from typer.testing import CliRunner

from jscall.cli.exit_codes import ExitCode
from jscall.config import load_config
from jscall.main import app

runner = CliRunner()


class TestConfigShow:
    """Test jscall config show."""

    def test_show_table(self) -> None:
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "anchor_tag" in result.output
        assert "jscall" in result.output

    def test_show_section(self) -> None:
        result = runner.invoke(app, ["config", "show", "document"])
        assert result.exit_code == 0
        assert "write_back" in result.output
        assert "anchor_tag" not in result.output

    def test_show_json(self) -> None:
        result = runner.invoke(app, ["config", "show", "--format", "json"])
        assert result.exit_code == 0
        assert '"result_channel_enabled": false' in result.output

    def test_show_yaml(self) -> None:
        result = runner.invoke(app, ["config", "show", "-f", "yaml"])
        assert result.exit_code == 0
        assert "request_tag: infunction" in result.output

    def test_show_section_json(self) -> None:
        result = runner.invoke(app, ["config", "show", "document", "--format", "json"])
        assert result.exit_code == 0
        assert '"write_back": true' in result.output
        assert "anchor_tag" not in result.output

    def test_show_section_yaml(self) -> None:
        result = runner.invoke(app, ["config", "show", "mailbox", "-f", "yaml"])
        assert result.exit_code == 0
        assert "request_tag: infunction" in result.output
        assert "write_back" not in result.output

    def test_unknown_section_with_format(self) -> None:
        result = runner.invoke(app, ["config", "show", "pipeline", "--format", "json"])
        assert result.exit_code == ExitCode.INVALID_ARGUMENT

    def test_show_from_file(self, tmp_path) -> None:
        config_file = tmp_path / "jscall.toml"
        config_file.write_text('[mailbox]\nanchor_tag = "callbox"\n')
        result = runner.invoke(app, ["config", "show", "mailbox", "--config", str(config_file)])
        assert "callbox" in result.output

    def test_unknown_section(self) -> None:
        result = runner.invoke(app, ["config", "show", "pipeline"])
        assert result.exit_code == ExitCode.INVALID_ARGUMENT

    def test_unknown_format(self) -> None:
        result = runner.invoke(app, ["config", "show", "--format", "xml"])
        assert result.exit_code == ExitCode.INVALID_ARGUMENT


class TestConfigValidate:
    """Test jscall config validate."""

    def test_defaults_are_valid(self) -> None:
        result = runner.invoke(app, ["config", "validate"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_invalid_tag(self, tmp_path) -> None:
        config_file = tmp_path / "jscall.toml"
        config_file.write_text('[mailbox]\nanchor_tag = "not a tag"\n')

        result = runner.invoke(app, ["config", "validate", "--config", str(config_file)])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "mailbox.anchor_tag" in result.output

    def test_warning_does_not_fail(self, tmp_path) -> None:
        config_file = tmp_path / "jscall.toml"
        config_file.write_text('[mailbox]\nresult_channel_enabled = true\n')

        result = runner.invoke(app, ["config", "validate", "--config", str(config_file)])
        assert result.exit_code == 0
        assert "WARNING" in result.output


class TestConfigSet:
    """Test jscall config set."""

    def test_set_value(self, tmp_path) -> None:
        config_file = tmp_path / "jscall.toml"
        result = runner.invoke(app, [
            "config", "set", "mailbox.anchor_tag", "callbox", "--config", str(config_file),
        ])

        assert result.exit_code == 0
        assert "Set mailbox.anchor_tag = callbox" in result.output
        assert load_config(config_file).mailbox.anchor_tag == "callbox"

    def test_set_default_location(self, isolated_config) -> None:
        result = runner.invoke(app, ["config", "set", "mailbox.result_channel_enabled", "true"])

        assert result.exit_code == 0
        assert load_config(isolated_config / "config.toml").mailbox.result_channel_enabled is True

    def test_key_without_section(self, tmp_path) -> None:
        result = runner.invoke(app, ["config", "set", "anchor_tag", "x", "--config", str(tmp_path / "c.toml")])
        assert result.exit_code == ExitCode.INVALID_ARGUMENT

    def test_unknown_key(self, tmp_path) -> None:
        result = runner.invoke(app, ["config", "set", "mailbox.mystery", "x", "--config", str(tmp_path / "c.toml")])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
