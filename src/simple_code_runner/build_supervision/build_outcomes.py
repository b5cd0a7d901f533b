"""Build supervision entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class BuildSuccess:
    """Build finished (or was not needed); carries what to execute next."""

    artifact_path_or_command: str
    artifact_path: Path | None = None

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class BuildFailure:
    """Compiler exited nonzero."""

    exit_code: int
    diagnostics: tuple[str, ...]

    @property
    def is_success(self) -> bool:
        return False


BuildOutcome = BuildSuccess | BuildFailure


@dataclass(frozen=True)
class CapturedProcess:
    """Exit status and combined, non-blank output lines of a finished process."""

    exit_code: int
    output_lines: tuple[str, ...]
