"""Build supervisor tests with a scripted process spawner."""

from __future__ import annotations

import asyncio
from pathlib import Path

from simple_code_runner.build_supervision.build_outcomes import (
    BuildFailure,
    BuildSuccess,
    CapturedProcess,
)
from simple_code_runner.build_supervision.build_supervisor import BuildSupervisor
from simple_code_runner.configuration.runtime_settings import (
    DEFAULT_FLAG_PROFILE,
    CompiledDirectRun,
    CompiledStandard,
    CompiledTwoPhase,
    FlagProfile,
    Interpreted,
    LanguageProfile,
)
from simple_code_runner.execution_state.state_models import LastBuildCache


class _ScriptedSpawner:
    def __init__(self, exit_code: int = 0, lines: tuple[str, ...] = ()) -> None:
        self.commands: list[str] = []
        self._result = CapturedProcess(exit_code=exit_code, output_lines=lines)

    async def __call__(self, command: str) -> CapturedProcess:
        self.commands.append(command)
        await asyncio.sleep(0)
        return self._result


def _build(supervisor: BuildSupervisor, profile: LanguageProfile, source: Path, outdir: Path):
    return asyncio.run(
        supervisor.build(profile.language_id, profile, source, outdir, DEFAULT_FLAG_PROFILE)
    )


def test_interpreted_language_short_circuits_without_spawning(tmp_path: Path) -> None:
    spawner = _ScriptedSpawner()
    cache = LastBuildCache()
    profile = LanguageProfile(language_id="echo-lang", strategy=Interpreted("echo $FILE"))

    outcome = _build(BuildSupervisor(cache, spawner=spawner), profile, Path("/tmp/a.txt"), tmp_path)

    assert outcome == BuildSuccess(artifact_path_or_command="echo /tmp/a.txt")
    assert spawner.commands == []
    assert len(cache) == 0


def test_direct_run_language_short_circuits_without_creating_output_dir(tmp_path: Path) -> None:
    spawner = _ScriptedSpawner()
    profile = LanguageProfile(language_id="go", strategy=CompiledDirectRun("go", "go run $FILE"))
    outdir = tmp_path / ".build"

    outcome = _build(
        BuildSupervisor(LastBuildCache(), spawner=spawner), profile, Path("/src/m.go"), outdir
    )

    assert outcome == BuildSuccess(artifact_path_or_command="go run /src/m.go")
    assert spawner.commands == []
    assert not outdir.exists()


def test_successful_compile_creates_output_dir_and_records_artifact(tmp_path: Path) -> None:
    spawner = _ScriptedSpawner(exit_code=0)
    cache = LastBuildCache()
    profile = LanguageProfile(language_id="cpp", strategy=CompiledStandard("g++"))
    outdir = tmp_path / ".build"

    outcome = _build(BuildSupervisor(cache, spawner=spawner), profile, Path("/src/sol.cpp"), outdir)

    assert outdir.is_dir()
    assert outcome == BuildSuccess(
        artifact_path_or_command=str(outdir / "sol"),
        artifact_path=outdir / "sol",
    )
    assert spawner.commands == [f"g++ /src/sol.cpp -o {outdir / 'sol'}"]
    assert cache.get("cpp") == outdir / "sol"


def test_active_flags_are_passed_to_the_compiler(tmp_path: Path) -> None:
    spawner = _ScriptedSpawner(exit_code=0)
    profile = LanguageProfile(
        language_id="cpp",
        strategy=CompiledStandard("g++"),
        flag_profiles=(FlagProfile("Release", "-O2"),),
    )

    asyncio.run(
        BuildSupervisor(LastBuildCache(), spawner=spawner).build(
            "cpp", profile, "/src/sol.cpp", tmp_path, FlagProfile("Release", "-O2")
        )
    )

    assert spawner.commands[0].startswith("g++ -O2 /src/sol.cpp")


def test_two_phase_success_returns_run_command(tmp_path: Path) -> None:
    spawner = _ScriptedSpawner(exit_code=0)
    cache = LastBuildCache()
    profile = LanguageProfile(language_id="java", strategy=CompiledTwoPhase("javac", "java"))

    outcome = _build(
        BuildSupervisor(cache, spawner=spawner), profile, Path("/src/Main.java"), tmp_path
    )

    assert isinstance(outcome, BuildSuccess)
    assert outcome.artifact_path_or_command == f"cd {tmp_path} && java Main"
    assert cache.get("java") == tmp_path / "Main"


def test_failed_compile_returns_diagnostics_and_leaves_cache_absent(tmp_path: Path) -> None:
    spawner = _ScriptedSpawner(exit_code=1, lines=("error: x undeclared",))
    cache = LastBuildCache()
    profile = LanguageProfile(language_id="c", strategy=CompiledStandard("gcc"))

    outcome = _build(BuildSupervisor(cache, spawner=spawner), profile, Path("/src/x.c"), tmp_path)

    assert outcome == BuildFailure(exit_code=1, diagnostics=("error: x undeclared",))
    assert cache.get("c") is None


def test_failed_compile_keeps_previous_cache_entry(tmp_path: Path) -> None:
    cache = LastBuildCache()
    cache.record("c", Path("/old/x"))
    profile = LanguageProfile(language_id="c", strategy=CompiledStandard("gcc"))
    supervisor = BuildSupervisor(cache, spawner=_ScriptedSpawner(exit_code=2, lines=("boom",)))

    outcome = _build(supervisor, profile, Path("/src/x.c"), tmp_path)

    assert isinstance(outcome, BuildFailure)
    assert outcome.exit_code == 2
    assert cache.get("c") == Path("/old/x")
