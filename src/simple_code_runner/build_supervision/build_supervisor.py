"""Asynchronous compile-step supervision."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from simple_code_runner.command_building import CompileStep, build_command
from simple_code_runner.configuration.runtime_settings import FlagProfile, LanguageProfile
from simple_code_runner.execution_state import LastBuildCache

from .build_outcomes import BuildFailure, BuildOutcome, BuildSuccess, CapturedProcess

_LOGGER = logging.getLogger(__name__)

ProcessSpawner = Callable[[str], Awaitable[CapturedProcess]]

_READ_CHUNK_SIZE = 64 * 1024


class BuildSpawnError(Exception):
    """Raised when the compile command could not be started at all."""


async def spawn_captured(command: str) -> CapturedProcess:
    """Run `command` through the shell, collecting stdout and stderr into one line buffer.

    Output is read in chunks, so lines of any length are kept whole.
    """
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise BuildSpawnError(f"Build command failed to start: {exc}") from exc

    lines: list[str] = []
    try:
        await asyncio.gather(
            _collect_lines(process.stdout, lines),
            _collect_lines(process.stderr, lines),
        )
    except BaseException:
        if process.returncode is None:
            process.kill()
        await process.wait()
        raise
    exit_code = await process.wait()
    return CapturedProcess(exit_code=exit_code, output_lines=tuple(lines))


async def _collect_lines(stream: asyncio.StreamReader | None, sink: list[str]) -> None:
    if stream is None:
        return
    pending = bytearray()
    while True:
        chunk = await stream.read(_READ_CHUNK_SIZE)
        if not chunk:
            break
        pending.extend(chunk)
        if b"\n" not in chunk:
            continue
        *complete, remainder = pending.split(b"\n")
        for raw in complete:
            _append_line(raw, sink)
        pending = bytearray(remainder)
    _append_line(pending, sink)


def _append_line(raw: bytes | bytearray, sink: list[str]) -> None:
    line = bytes(raw).decode("utf-8", errors="replace").rstrip("\r")
    if line:
        sink.append(line)


class BuildSupervisor:
    """Turns a language profile and source file into a runnable command.

    Interpreted and direct-run languages resolve immediately without spawning a
    process. Compiled languages spawn exactly one compile process; a zero exit
    records the artifact in the last-build cache.

    Builds of the same language are not serialized: two overlapping requests
    both run and the later one to finish owns the cache entry.
    """

    def __init__(
        self,
        last_build: LastBuildCache,
        *,
        spawner: ProcessSpawner | None = None,
    ) -> None:
        self._last_build = last_build
        self._spawn = spawner or spawn_captured

    async def build(
        self,
        language_id: str,
        profile: LanguageProfile,
        source_file_path: Path | str,
        output_dir: Path | str,
        active_flags: FlagProfile,
    ) -> BuildOutcome:
        plan = build_command(profile, source_file_path, output_dir, active_flags)
        if not isinstance(plan, CompileStep):
            return BuildSuccess(artifact_path_or_command=plan.run_command)

        plan.output_dir.mkdir(parents=True, exist_ok=True)
        _LOGGER.debug("building %s: %s", language_id, plan.compile_command)
        captured = await self._spawn(plan.compile_command)
        _LOGGER.debug("build for %s exited with %s", language_id, captured.exit_code)

        if captured.exit_code != 0:
            return BuildFailure(exit_code=captured.exit_code, diagnostics=captured.output_lines)

        self._last_build.record(language_id, plan.artifact_path)
        return BuildSuccess(
            artifact_path_or_command=plan.run_command,
            artifact_path=plan.artifact_path,
        )
