"""Orchestration engine: the command surface run against the host's current file."""

from __future__ import annotations

import asyncio
import functools
import glob
import logging
import shlex
import shutil
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from simple_code_runner.build_supervision import (
    BuildFailure,
    BuildSpawnError,
    BuildSuccess,
    BuildSupervisor,
)
from simple_code_runner.command_building import (
    BuildPlan,
    CompileStep,
    build_command,
    redirect_input,
    requires_compilation,
)
from simple_code_runner.configuration import (
    CompiledDirectRun,
    CompiledTwoPhase,
    ConfigurationError,
    RunnerSettings,
)
from simple_code_runner.execution_state import ExecutionState, HistoryEntry
from simple_code_runner.results_writing import (
    render_build_failure,
    render_elapsed,
    render_history,
    render_test_report,
)
from simple_code_runner.session_management import SessionError, SessionManager
from simple_code_runner.test_harness import (
    CompletedRun,
    TestHarnessError,
    discover_test_cases,
    run_redirected,
    run_test_cases,
)
from simple_code_runner.test_harness.case_evaluator import CaseRunner

from .run_contracts import HostContext, NotificationLevel, RunExecutionError, RunTarget

_LOGGER = logging.getLogger(__name__)

IoRunner = Callable[[str, Path, Path], CompletedRun]
Clock = Callable[[], float]

_Operation = TypeVar("_Operation", bound=Callable[..., Awaitable[bool]])

COMMAND_NAMES = (
    "run",
    "build_only",
    "run_last",
    "run_with_input",
    "run_with_io_files",
    "run_tests",
    "run_floating",
    "toggle_floating",
    "cycle_profile",
    "toggle_watch",
    "show_history",
    "clean",
)


def _reported(operation: _Operation) -> _Operation:
    """Turn domain errors raised by an operation into one notification and a False result."""

    @functools.wraps(operation)
    async def _wrapper(self: OrchestrationEngine, *args: Any, **kwargs: Any) -> bool:
        try:
            return await operation(self, *args, **kwargs)
        except RunExecutionError as exc:
            self._host.notify(str(exc), exc.level)
        except (ConfigurationError, TestHarnessError) as exc:
            self._host.notify(str(exc), NotificationLevel.WARN)
        except (BuildSpawnError, SessionError, OSError) as exc:
            self._host.notify(str(exc), NotificationLevel.ERROR)
        return False

    return _wrapper  # type: ignore[return-value]


class OrchestrationEngine:  # pylint: disable=too-many-instance-attributes
    """Compiles, runs and tests the host's current file.

    Every public operation is a coroutine returning True when it did its work
    and False when it reported a problem and stopped. All state lives in
    `self.state` and is only touched from the event-loop thread.
    """

    def __init__(
        self,
        settings: RunnerSettings,
        host: HostContext,
        sessions: SessionManager,
        *,
        state: ExecutionState | None = None,
        supervisor: BuildSupervisor | None = None,
        workspace_root: Path | str | None = None,
        case_runner: CaseRunner | None = None,
        io_runner: IoRunner | None = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self._settings = settings
        self._host = host
        self._sessions = sessions
        self.state = state or ExecutionState()
        self._supervisor = supervisor or BuildSupervisor(self.state.last_build)
        self._root = Path(workspace_root) if workspace_root is not None else Path.cwd()
        self._case_runner = case_runner
        self._io_runner = io_runner or run_redirected
        self._clock = clock
        self._background: set[asyncio.Task[bool]] = set()
        self.last_exit_code: int | None = None

    @property
    def settings(self) -> RunnerSettings:
        return self._settings

    @property
    def build_dir(self) -> Path:
        return self._root / self._settings.build_dir

    async def dispatch(self, name: str) -> bool:
        """Invoke the operation called `name` (one of COMMAND_NAMES)."""
        if name not in COMMAND_NAMES:
            raise ValueError(f"Unknown operation: {name}")
        operation: Callable[[], Awaitable[bool]] = getattr(self, name)
        return await operation()

    async def drain(self) -> None:
        """Wait for watch-triggered runs and every session job to finish."""
        while self._background:
            await asyncio.gather(*tuple(self._background), return_exceptions=True)
        await self._sessions.drain()

    # ------------------------------------------------------------------ run

    @_reported
    async def run(self) -> bool:
        """Build if needed, then run in a fresh bottom session."""
        target = self._resolve_target()
        self._host.save_current_file()
        started = self._clock()

        outcome = await self._build(target)
        if outcome is None:
            return False
        self._sessions.run_in_bottom_session(
            outcome.artifact_path_or_command,
            self._completion_callback(target, started, outcome.artifact_path),
        )
        return True

    @_reported
    async def build_only(self) -> bool:
        target = self._resolve_target()
        strategy = target.profile.strategy
        if not target.profile.is_compiled:
            self._host.notify("This language does not require compilation")
            return False
        if isinstance(strategy, CompiledDirectRun):
            self._host.notify(
                f"{target.language_id} compiles and runs in one step; nothing to build"
            )
            return False

        self._host.save_current_file()
        return await self._build(target) is not None

    @_reported
    async def run_last(self) -> bool:
        """Run the last successful build without recompiling."""
        target = self._resolve_target()
        if not target.profile.is_compiled:
            raise RunExecutionError("Not a compiled language")
        if not requires_compilation(target.profile.strategy):
            raise RunExecutionError(
                f"{target.language_id} compiles and runs in one step; no artifact to rerun"
            )

        command = self._existing_artifact_command(target, use_cache=True)
        artifact = self._artifact_path(target, use_cache=True)
        if command is None:
            if not self._host.confirm("Binary not found. Do you want to build first?"):
                self._host.notify("Cancelled")
                return False
            outcome = await self._build(target)
            if outcome is None:
                return False
            command, artifact = outcome.artifact_path_or_command, outcome.artifact_path

        started = self._clock()
        self._sessions.run_in_bottom_session(
            command, self._completion_callback(target, started, artifact)
        )
        return True

    @_reported
    async def run_with_input(self) -> bool:
        """Run with the configured input file redirected to standard input."""
        target = self._resolve_target()
        input_path = self._ensure_input_file()
        self._host.save_current_file()
        started = self._clock()

        outcome = await self._build(target)
        if outcome is None:
            return False
        self._sessions.run_in_bottom_session(
            redirect_input(outcome.artifact_path_or_command, input_path),
            self._completion_callback(target, started, None),
        )
        return True

    @_reported
    async def run_with_io_files(self) -> bool:
        """Run synchronously with input file -> program -> output file."""
        target = self._resolve_target()
        input_path = self._ensure_input_file()
        output_path = self._root / self._settings.output_file
        self._host.save_current_file()

        command = await self._existing_or_built_command(target)
        if command is None:
            return False
        started = self._clock()
        completed = self._io_runner(command, input_path, output_path)
        self._record_history(target, self._clock() - started)
        self.last_exit_code = completed.exit_code

        if completed.exit_code != 0:
            self._host.notify(
                f"Runtime error (code {completed.exit_code})", NotificationLevel.ERROR
            )
            return False
        self._host.notify(f"Success! Output written to {self._settings.output_file}")
        return True

    @_reported
    async def run_tests(self) -> bool:
        """Run the program once per `*.in` file and compare against `*.out`."""
        target = self._resolve_target()
        test_cases = discover_test_cases(self._root / self._settings.test_dir)
        self._host.save_current_file()

        command = await self._existing_or_built_command(target)
        if command is None:
            return False
        result = run_test_cases(test_cases, command, case_runner=self._case_runner)
        self._host.notify(
            render_test_report(result),
            NotificationLevel.INFO if result.all_passed else NotificationLevel.WARN,
        )
        return result.all_passed

    @_reported
    async def run_floating(self) -> bool:
        """Build if needed, then run in a disposable floating session."""
        target = self._resolve_target()
        self._host.save_current_file()

        outcome = await self._build(target)
        if outcome is None:
            return False
        self._sessions.run_in_floating_session(outcome.artifact_path_or_command)
        return True

    @_reported
    async def toggle_floating(self) -> bool:
        state = self._sessions.toggle_floating_session()
        _LOGGER.debug("floating session is now %s", state.value)
        return True

    # ------------------------------------------------------------ state ops

    @_reported
    async def cycle_profile(self) -> bool:
        target = self._resolve_target()
        selected = self.state.profiles.cycle(target.profile)
        if selected is None:
            raise RunExecutionError("No profiles available for this language")
        self._host.notify(f"Profile: {selected.name}")
        return True

    @_reported
    async def toggle_watch(self) -> bool:
        enabled = self.state.watch.toggle(self._host.subscribe_to_saves, self._on_file_saved)
        if enabled:
            self._host.notify("👁 Watch mode: ON (auto-run on save)")
        else:
            self._host.notify("👁 Watch mode: OFF")
        return True

    @_reported
    async def show_history(self) -> bool:
        self._host.notify(render_history(self.state.history.entries()))
        return True

    @_reported
    async def clean(self) -> bool:
        """Delete the build directory after confirmation and forget cached artifacts."""
        build_dir = self.build_dir
        if not build_dir.is_dir():
            self._host.notify("Build directory does not exist")
            return False
        if not self._host.confirm(f"Clean build directory: {build_dir}?", default=False):
            self._host.notify("Cancelled")
            return False
        shutil.rmtree(build_dir)
        self.state.last_build.clear()
        self._host.notify("🗑️  Build directory cleaned")
        return True

    # -------------------------------------------------------------- helpers

    def _resolve_target(self) -> RunTarget:
        language_id = self._host.language_id()
        profile = self._settings.runners.get(language_id) if language_id else None
        if language_id is None or profile is None:
            raise RunExecutionError(f"No runner configured for language: {language_id or '?'}")
        return RunTarget(
            language_id=language_id,
            profile=profile,
            source_path=self._host.current_file().resolve(),
        )

    def _plan(self, target: RunTarget) -> BuildPlan:
        return build_command(
            target.profile,
            target.source_path,
            self.build_dir,
            self.state.profiles.active_profile(target.profile),
        )

    async def _build(self, target: RunTarget) -> BuildSuccess | None:
        """Build through the supervisor, reporting start, success and failure."""
        active = self.state.profiles.active_profile(target.profile)
        compiles = requires_compilation(target.profile.strategy)
        if compiles:
            self._host.notify(f"Building ({active.name}): {target.source_path.name}")

        outcome = await self._supervisor.build(
            target.language_id,
            target.profile,
            target.source_path,
            self.build_dir,
            active,
        )
        if isinstance(outcome, BuildFailure):
            self._host.notify(render_build_failure(outcome), NotificationLevel.ERROR)
            return None
        if compiles:
            self._host.notify("✓ Build success")
        return outcome

    async def _existing_or_built_command(self, target: RunTarget) -> str | None:
        """Runnable command, building only when no artifact exists for the current file."""
        if not requires_compilation(target.profile.strategy):
            return self._plan(target).run_command
        existing = self._existing_artifact_command(target, use_cache=False)
        if existing is not None:
            return existing
        outcome = await self._build(target)
        return outcome.artifact_path_or_command if outcome is not None else None

    def _existing_artifact_command(self, target: RunTarget, *, use_cache: bool) -> str | None:
        plan = self._plan(target)
        if not isinstance(plan, CompileStep):
            return None
        cached = self.state.last_build.get(target.language_id) if use_cache else None
        if isinstance(target.profile.strategy, CompiledTwoPhase):
            pattern = f"{glob.escape(plan.artifact_path.name)}.*"
            if cached is not None or any(plan.output_dir.glob(pattern)):
                return plan.run_command
            return None
        artifact = self._artifact_path(target, use_cache=use_cache)
        if artifact is not None and artifact.is_file():
            return shlex.quote(str(artifact))
        return None

    def _artifact_path(self, target: RunTarget, *, use_cache: bool) -> Path | None:
        if isinstance(target.profile.strategy, CompiledTwoPhase):
            return None
        cached = self.state.last_build.get(target.language_id) if use_cache else None
        if cached is not None:
            return cached
        plan = self._plan(target)
        return plan.artifact_path if isinstance(plan, CompileStep) else None

    def _completion_callback(
        self, target: RunTarget, started: float, artifact: Path | None
    ) -> Callable[[int], None]:
        def _on_complete(exit_code: int) -> None:
            elapsed = self._clock() - started
            self.last_exit_code = exit_code
            self._record_history(target, elapsed)
            if exit_code != 0:
                self._host.notify(f"Runtime error (code {exit_code})", NotificationLevel.ERROR)
            elif self._settings.show_time:
                self._host.notify(render_elapsed(elapsed))
            if artifact is not None and self._settings.clean_after_run and artifact.is_file():
                artifact.unlink()
                self._host.notify("🗑️  Binary removed")

        return _on_complete

    def _record_history(self, target: RunTarget, elapsed: float) -> None:
        self.state.history.record(
            HistoryEntry(
                file_name=target.source_path.name,
                language_id=target.language_id,
                elapsed_seconds=elapsed,
                timestamp=datetime.now().strftime("%H:%M:%S"),
            )
        )

    def _ensure_input_file(self) -> Path:
        input_path = self._root / self._settings.input_file
        if not input_path.is_file():
            input_path.write_text("\n", encoding="utf-8")
            self._host.notify(f"Created empty {self._settings.input_file}")
        return input_path

    def _on_file_saved(self, path: Path) -> None:
        language_id = self._host.language_id()
        if language_id is None or language_id not in self._settings.runners:
            return
        _LOGGER.debug("watch mode: %s saved", path)
        self._host.notify("🔄 Watch mode: Running...")
        self.state.watch.schedule(
            self._launch_watched_run, self._settings.watch.debounce_ms / 1000
        )

    def _launch_watched_run(self) -> None:
        task = asyncio.get_running_loop().create_task(self.run())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
