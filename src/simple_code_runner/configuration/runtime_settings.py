"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

FILE_PLACEHOLDER = "$FILE"


class ExecutionMode(str, Enum):
    """How a language turns a source file into a running program."""

    COMPILED = "compiled"
    INTERPRETED = "interpreted"


@dataclass(frozen=True)
class FlagProfile:
    """Named set of compiler flags, e.g. Debug or Release."""

    name: str
    flags: str


DEFAULT_FLAG_PROFILE = FlagProfile(name="Default", flags="")


@dataclass(frozen=True)
class Interpreted:
    """Run the source file through an interpreter invocation template."""

    invocation_template: str


@dataclass(frozen=True)
class CompiledStandard:
    """Compile to `<build_dir>/<base>` and run the artifact directly."""

    compiler_path: str


@dataclass(frozen=True)
class CompiledDirectRun:
    """Toolchain that compiles and runs in one command (`go run $FILE`)."""

    compiler_path: str
    direct_run_template: str


@dataclass(frozen=True)
class CompiledTwoPhase:
    """Compile into `<build_dir>` and launch the result through a secondary runtime."""

    compiler_path: str
    post_build_run_template: str


ExecutionStrategy = Interpreted | CompiledStandard | CompiledDirectRun | CompiledTwoPhase


@dataclass(frozen=True)
class LanguageProfile:
    """Resolved runner configuration for one language identifier."""

    language_id: str
    strategy: ExecutionStrategy
    flag_profiles: tuple[FlagProfile, ...] = ()
    extensions: tuple[str, ...] = ()

    @property
    def mode(self) -> ExecutionMode:
        if isinstance(self.strategy, Interpreted):
            return ExecutionMode.INTERPRETED
        return ExecutionMode.COMPILED

    @property
    def is_compiled(self) -> bool:
        return self.mode is ExecutionMode.COMPILED


@dataclass(frozen=True)
class TerminalSettings:
    """Shell used for floating sessions and how replaced sessions are closed."""

    shell: str
    terminate_on_close: bool


@dataclass(frozen=True)
class WatchSettings:
    """Watch-mode timing."""

    debounce_ms: int
    poll_interval_ms: int


@dataclass(frozen=True)
class RunnerSettings:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration aggregate."""

    build_dir: str
    test_dir: str
    input_file: str
    output_file: str
    show_time: bool
    clean_after_run: bool
    terminal: TerminalSettings
    watch: WatchSettings
    runners: Mapping[str, LanguageProfile] = field(default_factory=dict)
    source_path: Path | None = None

    def language_for_path(self, path: Path | str) -> str | None:
        """Return the language identifier registered for the file's extension."""
        suffix = Path(path).suffix.lower()
        if not suffix:
            return None
        for language_id, profile in self.runners.items():
            if suffix in profile.extensions:
                return language_id
        return None
