"""Command line interface entry point."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path

import click

from simple_code_runner.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from simple_code_runner.host_integration import CliHostContext
from simple_code_runner.run_execution import OrchestrationEngine
from simple_code_runner.session_management import SessionManager, TerminalSessionHost


class CliError(Exception):
    """Custom CLI error."""


class OperationFailed(CliError):
    """The operation already reported its problem; only the exit code is left."""


_INTERACTIVE_ALIASES = {
    "run": "run",
    "build": "build_only",
    "last": "run_last",
    "input": "run_with_input",
    "io": "run_with_io_files",
    "test": "run_tests",
    "float": "run_floating",
    "shell": "toggle_floating",
    "profile": "cycle_profile",
    "watch": "toggle_watch",
    "history": "show_history",
    "clean": "clean",
}

_QUIT_WORDS = frozenset({"q", "quit", "exit"})


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-code-runner")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug details to stderr.")
def cli(verbose: bool) -> None:
    """Compile, run and test single source files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _target_options(function: Callable) -> Callable:
    function = click.option(
        "--yes",
        "-y",
        "assume_yes",
        is_flag=True,
        default=False,
        help="Answer yes to confirmation prompts.",
    )(function)
    function = click.option(
        "--config",
        "config_path",
        required=False,
        type=click.Path(path_type=str),
        help=f"Runner override file (default: ./{DEFAULT_CONFIG_FILENAME} when present)",
    )(function)
    function = click.option(
        "--language",
        "-l",
        "language",
        required=False,
        help="Language identifier; detected from the file extension when omitted.",
    )(function)
    return click.argument(
        "source_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )(function)


def _build_engine(
    source_file: Path,
    language: str | None,
    config_path: str | None,
    assume_yes: bool,
) -> OrchestrationEngine:
    try:
        settings = load_configuration(_resolve_config_path(config_path))
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc

    language_id = language or settings.language_for_path(source_file)
    host = CliHostContext(
        source_file,
        language_id,
        poll_interval_seconds=settings.watch.poll_interval_ms / 1000,
        assume_yes=assume_yes,
    )
    sessions = SessionManager(
        TerminalSessionHost(),
        shell=settings.terminal.shell,
        terminate_on_close=settings.terminal.terminate_on_close,
    )
    return OrchestrationEngine(settings, host, sessions, workspace_root=Path.cwd())


def _resolve_config_path(config_path: str | None) -> Path | None:
    if config_path is not None:
        return Path(config_path)
    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    return default_path if default_path.exists() else None


def _execute(engine: OrchestrationEngine, operation: str) -> None:
    async def _run_to_completion() -> bool:
        succeeded = await engine.dispatch(operation)
        await engine.drain()
        return succeeded

    succeeded = asyncio.run(_run_to_completion())
    if not succeeded or engine.last_exit_code not in (None, 0):
        raise OperationFailed("")


def _register_operation_command(name: str, operation: str, help_text: str) -> None:
    @_target_options
    def _command(
        source_file: Path,
        language: str | None,
        config_path: str | None,
        assume_yes: bool,
    ) -> None:
        _execute(_build_engine(source_file, language, config_path, assume_yes), operation)

    cli.command(name=name, help=help_text)(_command)


for _name, _operation, _help in (
    ("run", "run", "Build if needed, then run the file."),
    ("build", "build_only", "Compile the file without running it."),
    ("last", "run_last", "Run the last built executable without recompiling."),
    ("input", "run_with_input", "Run with the input file redirected to stdin."),
    ("io", "run_with_io_files", "Run with input file -> program -> output file."),
    ("test", "run_tests", "Run every *.in case in the test directory and compare with *.out."),
    ("float", "run_floating", "Run in a disposable floating shell session."),
    ("profile", "cycle_profile", "Cycle the active compiler flag profile."),
    ("history", "show_history", "Show the most recent runs."),
    ("clean", "clean", "Delete the build directory."),
):
    _register_operation_command(_name, _operation, _help)


@cli.command(name="shell")
@click.option("--config", "config_path", required=False, type=click.Path(path_type=str))
def shell(config_path: str | None) -> None:
    """Open the persistent floating shell."""
    engine = _build_engine(Path.cwd(), None, config_path, assume_yes=False)
    _execute(engine, "toggle_floating")


@cli.command(name="watch")
@_target_options
def watch(
    source_file: Path,
    language: str | None,
    config_path: str | None,
    assume_yes: bool,
) -> None:
    """Re-run the file every time it is saved, until interrupted."""
    engine = _build_engine(source_file, language, config_path, assume_yes)

    async def _watch_forever() -> None:
        if not await engine.toggle_watch():
            raise OperationFailed("")
        try:
            await asyncio.Event().wait()
        finally:
            engine.state.watch.disable()

    try:
        asyncio.run(_watch_forever())
    except KeyboardInterrupt:
        click.echo("Watch mode stopped.")


@cli.command(name="interactive")
@_target_options
def interactive(
    source_file: Path,
    language: str | None,
    config_path: str | None,
    assume_yes: bool,
) -> None:
    """Keep one runner alive and read commands from the prompt."""
    engine = _build_engine(source_file, language, config_path, assume_yes)
    click.echo(f"Commands: {', '.join(_INTERACTIVE_ALIASES)}, quit")
    asyncio.run(_interactive_loop(engine))


async def _interactive_loop(engine: OrchestrationEngine) -> None:
    while True:
        try:
            choice = await asyncio.to_thread(click.prompt, "runner", default="run")
        except click.Abort:
            break
        word = choice.strip().lower()
        if word in _QUIT_WORDS:
            break
        operation = _INTERACTIVE_ALIASES.get(word)
        if operation is None:
            click.echo(f"Unknown command: {word}", err=True)
            continue
        await engine.dispatch(operation)
        await engine.drain()
    engine.state.watch.disable()
    await engine.drain()


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML runner override file to write",
)
def generate_config(output_path: str) -> None:
    """Generate a commented YAML runner override file."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        if str(exc):
            click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
