"""CLI smoke tests."""

from click.testing import CliRunner
from simple_code_runner.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("run", "build", "last", "input", "io", "test", "float", "shell", "watch"):
        assert command in result.output
    assert "generate-config" in result.output


def test_operation_command_help_mentions_language_option() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["test", "--help"])

    assert result.exit_code == 0
    assert "SOURCE_FILE" in result.output
    assert "--language" in result.output
