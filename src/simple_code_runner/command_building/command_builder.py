"""Concrete shell commands for building and running one source file."""

from __future__ import annotations

import shlex
from pathlib import Path

from simple_code_runner.configuration.runtime_settings import (
    FILE_PLACEHOLDER,
    CompiledDirectRun,
    CompiledStandard,
    CompiledTwoPhase,
    ExecutionStrategy,
    FlagProfile,
    Interpreted,
    LanguageProfile,
)

from .command_plans import BuildPlan, CompileStep, ImmediateCommand


def build_command(
    profile: LanguageProfile,
    source_file_path: Path | str,
    output_dir: Path | str,
    active_flags: FlagProfile,
) -> BuildPlan:
    """Resolve the build and/or run command for `source_file_path`."""
    source = Path(source_file_path).resolve()
    outdir = Path(output_dir)
    strategy = profile.strategy

    if isinstance(strategy, Interpreted):
        return ImmediateCommand(run_command=substitute_file(strategy.invocation_template, source))
    if isinstance(strategy, CompiledDirectRun):
        return ImmediateCommand(run_command=substitute_file(strategy.direct_run_template, source))
    if isinstance(strategy, CompiledTwoPhase):
        return _two_phase_step(strategy, source, outdir, active_flags.flags)
    if isinstance(strategy, CompiledStandard):
        return _standard_step(strategy, source, outdir, active_flags.flags)
    raise TypeError(f"Unsupported execution strategy: {strategy!r}")


def substitute_file(template: str, source: Path | str) -> str:
    """Replace every file placeholder in `template` with the source path, verbatim."""
    return template.replace(FILE_PLACEHOLDER, str(source))


def requires_compilation(strategy: ExecutionStrategy) -> bool:
    """True when the strategy spawns a separate compile step."""
    return isinstance(strategy, CompiledStandard | CompiledTwoPhase)


def redirect_input(command: str, input_path: Path | str) -> str:
    return f"{command} < {shlex.quote(str(input_path))}"


def _standard_step(
    strategy: CompiledStandard, source: Path, outdir: Path, flags: str
) -> CompileStep:
    artifact = outdir / source.stem
    compile_command = _join(
        strategy.compiler_path,
        flags,
        shlex.quote(str(source)),
        "-o",
        shlex.quote(str(artifact)),
    )
    return CompileStep(
        compile_command=compile_command,
        run_command=shlex.quote(str(artifact)),
        artifact_path=artifact,
        output_dir=outdir,
    )


def _two_phase_step(
    strategy: CompiledTwoPhase, source: Path, outdir: Path, flags: str
) -> CompileStep:
    compile_command = _join(
        strategy.compiler_path,
        flags,
        shlex.quote(str(source)),
        "-d",
        shlex.quote(str(outdir)),
    )
    run_command = (
        f"cd {shlex.quote(str(outdir))} && "
        f"{strategy.post_build_run_template} {shlex.quote(source.stem)}"
    )
    return CompileStep(
        compile_command=compile_command,
        run_command=run_command,
        artifact_path=outdir / source.stem,
        output_dir=outdir,
    )


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)
