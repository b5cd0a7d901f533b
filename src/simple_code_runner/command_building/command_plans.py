"""Command building entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ImmediateCommand:
    """Runnable command with no separate build step (interpreted or direct-run)."""

    run_command: str


@dataclass(frozen=True)
class CompileStep:
    """Compile command plus the command that runs what it produces."""

    compile_command: str
    run_command: str
    artifact_path: Path
    output_dir: Path


BuildPlan = ImmediateCommand | CompileStep
