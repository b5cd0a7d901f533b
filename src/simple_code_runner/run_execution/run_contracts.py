"""Run execution entities and host-editor contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from simple_code_runner.configuration.runtime_settings import LanguageProfile


class NotificationLevel(str, Enum):
    """Severity of a user notification."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class RunExecutionError(Exception):
    """Raised when an operation has to stop before doing its work."""

    def __init__(self, message: str, *, level: NotificationLevel = NotificationLevel.WARN) -> None:
        super().__init__(message)
        self.level = level


class HostContext(Protocol):
    """Editor-side collaborator that knows the current file and talks to the user."""

    def current_file(self) -> Path: ...

    def language_id(self) -> str | None: ...

    def save_current_file(self) -> None: ...

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None: ...

    def confirm(self, prompt: str, *, default: bool = True) -> bool: ...

    def subscribe_to_saves(
        self, callback: Callable[[Path], None]
    ) -> Callable[[], None]: ...


@dataclass(frozen=True)
class RunTarget:
    """Language and source file an operation acts on."""

    language_id: str
    profile: LanguageProfile
    source_path: Path
