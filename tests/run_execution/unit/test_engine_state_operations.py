"""Tests for profile cycling, watch mode, history and cleanup operations."""

from __future__ import annotations

import asyncio
import itertools
from pathlib import Path

from simple_code_runner.build_supervision import BuildSupervisor, CapturedProcess
from simple_code_runner.configuration import load_configuration
from simple_code_runner.execution_state import ExecutionState
from simple_code_runner.run_execution import NotificationLevel, OrchestrationEngine
from simple_code_runner.session_management import SessionManager

_RUNNERS = {
    "echo-lang": {"type": "interpreted", "command": "echo $FILE"},
    "toy": {
        "type": "compiled",
        "compiler": "toycc",
        "profiles": [{"name": "Debug", "flags": "-g"}, {"name": "Release", "flags": "-O2"}],
    },
}


class _WatchingHost:
    def __init__(self, source: Path, language_id: str, *, answer: bool = True) -> None:
        self.source = source
        self.language = language_id
        self.answer = answer
        self.messages: list[tuple[NotificationLevel, str]] = []
        self.prompts: list[tuple[str, bool]] = []
        self.save_callback = None
        self.unsubscribed = 0

    def current_file(self) -> Path:
        return self.source

    def language_id(self) -> str:
        return self.language

    def save_current_file(self) -> None:
        return None

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.messages.append((level, message))

    def confirm(self, prompt: str, *, default: bool = True) -> bool:
        self.prompts.append((prompt, default))
        return self.answer

    def subscribe_to_saves(self, callback):
        self.save_callback = callback

        def _unsubscribe() -> None:
            self.unsubscribed += 1

        return _unsubscribe

    def texts(self) -> list[str]:
        return [message for _, message in self.messages]


class _InstantSessionHost:
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.commands: list[object] = []

    def create_buffer(self) -> int:
        return next(self._ids)

    def open_window(self, buffer_id, kind) -> int:
        return next(self._ids)

    def close_window(self, window_id) -> None:
        return None

    def is_window_valid(self, window_id) -> bool:
        return True

    def is_buffer_valid(self, buffer_id) -> bool:
        return True

    def start_job(self, buffer_id, command, on_exit) -> None:
        self.commands.append(command)
        asyncio.get_running_loop().call_soon(on_exit, 0)

    def stop_job(self, buffer_id) -> None:
        return None


class _RecordingSpawner:
    def __init__(self) -> None:
        self.commands: list[str] = []

    async def __call__(self, command: str) -> CapturedProcess:
        self.commands.append(command)
        return CapturedProcess(exit_code=0, output_lines=())


def _engine(tmp_path, host, *, sessions=None, spawner=None, **overrides) -> OrchestrationEngine:
    settings = load_configuration(overrides={"runners": _RUNNERS, **overrides})
    state = ExecutionState()
    return OrchestrationEngine(
        settings,
        host,
        SessionManager(sessions or _InstantSessionHost()),
        state=state,
        supervisor=BuildSupervisor(state.last_build, spawner=spawner or _RecordingSpawner()),
        workspace_root=tmp_path,
    )


def test_cycle_profile_advances_and_wraps(tmp_path: Path) -> None:
    host = _WatchingHost(tmp_path / "sol.toy", "toy")
    engine = _engine(tmp_path, host)

    async def scenario() -> None:
        assert await engine.cycle_profile()
        assert await engine.cycle_profile()

    asyncio.run(scenario())

    assert host.texts() == ["Profile: Release", "Profile: Debug"]
    assert engine.state.profiles.index_for("toy") == 1


def test_selected_profile_flags_reach_the_compiler(tmp_path: Path) -> None:
    source = tmp_path / "sol.toy"
    source.write_text("", encoding="utf-8")
    host = _WatchingHost(source, "toy")
    spawner = _RecordingSpawner()
    engine = _engine(tmp_path, host, spawner=spawner)

    async def scenario() -> None:
        await engine.cycle_profile()
        await engine.build_only()

    asyncio.run(scenario())

    assert spawner.commands[0].startswith("toycc -O2 ")
    assert "Building (Release): sol.toy" in host.texts()


def test_cycle_profile_without_profiles_is_reported(tmp_path: Path) -> None:
    host = _WatchingHost(tmp_path / "a.txt", "echo-lang")
    engine = _engine(tmp_path, host)

    assert not asyncio.run(engine.cycle_profile())

    assert host.messages == [
        (NotificationLevel.WARN, "No profiles available for this language")
    ]
    assert engine.state.profiles.index_for("echo-lang") == 1


def test_watch_mode_runs_once_per_burst_of_saves(tmp_path: Path) -> None:
    source = tmp_path / "a.txt"
    source.write_text("", encoding="utf-8")
    host = _WatchingHost(source, "echo-lang")
    sessions = _InstantSessionHost()
    engine = _engine(tmp_path, host, sessions=sessions, watch={"debounce_ms": 5})

    async def scenario() -> None:
        assert await engine.toggle_watch()
        assert engine.state.watch.enabled
        host.save_callback(source)
        host.save_callback(source)
        await asyncio.sleep(0.1)
        await engine.drain()
        assert await engine.toggle_watch()

    asyncio.run(scenario())

    assert sessions.commands == [f"echo {source.resolve()}"]
    assert not engine.state.watch.enabled
    assert host.unsubscribed == 1
    texts = host.texts()
    assert texts[0] == "👁 Watch mode: ON (auto-run on save)"
    assert texts.count("🔄 Watch mode: Running...") == 2
    assert texts[-1] == "👁 Watch mode: OFF"


def test_watch_mode_ignores_saves_for_unconfigured_languages(tmp_path: Path) -> None:
    host = _WatchingHost(tmp_path / "notes.md", "markdown")
    sessions = _InstantSessionHost()
    engine = _engine(tmp_path, host, sessions=sessions, watch={"debounce_ms": 5})

    async def scenario() -> None:
        await engine.toggle_watch()
        host.save_callback(host.source)
        await asyncio.sleep(0.05)
        await engine.drain()
        engine.state.watch.disable()

    asyncio.run(scenario())

    assert sessions.commands == []
    assert host.texts() == ["👁 Watch mode: ON (auto-run on save)"]


def test_history_lists_completed_runs(tmp_path: Path) -> None:
    source = tmp_path / "a.txt"
    source.write_text("", encoding="utf-8")
    host = _WatchingHost(source, "echo-lang")
    engine = _engine(tmp_path, host, show_time=False)

    async def scenario() -> None:
        await engine.show_history()
        await engine.run()
        await engine.drain()
        await engine.show_history()

    asyncio.run(scenario())

    assert host.texts()[0] == "No run history yet"
    report = host.texts()[-1].splitlines()
    assert report[0] == "📊 Run History (Last 10):"
    assert report[2].startswith("1. [")
    assert "] a.txt (echo-lang) - " in report[2]


def test_clean_without_build_directory_is_reported(tmp_path: Path) -> None:
    host = _WatchingHost(tmp_path / "sol.toy", "toy")
    engine = _engine(tmp_path, host)

    assert not asyncio.run(engine.clean())

    assert host.texts() == ["Build directory does not exist"]
    assert host.prompts == []


def test_clean_keeps_directory_when_not_confirmed(tmp_path: Path) -> None:
    build_dir = tmp_path / ".build"
    build_dir.mkdir()
    host = _WatchingHost(tmp_path / "sol.toy", "toy", answer=False)
    engine = _engine(tmp_path, host)

    assert not asyncio.run(engine.clean())

    assert build_dir.is_dir()
    assert host.prompts == [(f"Clean build directory: {build_dir}?", False)]
    assert host.texts() == ["Cancelled"]


def test_clean_removes_directory_and_forgets_artifacts(tmp_path: Path) -> None:
    build_dir = tmp_path / ".build"
    (build_dir / "nested").mkdir(parents=True)
    (build_dir / "sol").write_text("binary", encoding="utf-8")
    host = _WatchingHost(tmp_path / "sol.toy", "toy")
    engine = _engine(tmp_path, host)
    engine.state.last_build.record("toy", build_dir / "sol")

    assert asyncio.run(engine.clean())

    assert not build_dir.exists()
    assert "toy" not in engine.state.last_build
    assert host.texts() == ["🗑️  Build directory cleaned"]
