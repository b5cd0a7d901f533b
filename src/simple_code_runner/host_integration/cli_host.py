"""Terminal rendition of the host-editor collaborator."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from pathlib import Path

import click

from simple_code_runner.run_execution.run_contracts import NotificationLevel

from .save_watcher import PollingSaveWatcher

_MESSAGE_HISTORY = 50

_LEVEL_COLORS = {
    NotificationLevel.INFO: None,
    NotificationLevel.WARN: "yellow",
    NotificationLevel.ERROR: "red",
}


class CliHostContext:
    """Current file, notifications and confirmations for a terminal session.

    Only the most recent notifications are kept in ``messages``.
    """

    def __init__(
        self,
        source_file: Path,
        language_id: str | None,
        *,
        poll_interval_seconds: float = 0.25,
        assume_yes: bool = False,
    ) -> None:
        self._source_file = source_file
        self._language_id = language_id
        self._poll_interval = poll_interval_seconds
        self._assume_yes = assume_yes
        self.messages: deque[tuple[NotificationLevel, str]] = deque(maxlen=_MESSAGE_HISTORY)

    def current_file(self) -> Path:
        return self._source_file

    def language_id(self) -> str | None:
        return self._language_id

    def save_current_file(self) -> None:
        # files are saved by the user's editor
        return None

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.messages.append((level, message))
        click.secho(
            message,
            fg=_LEVEL_COLORS[level],
            err=level is not NotificationLevel.INFO,
        )

    def confirm(self, prompt: str, *, default: bool = True) -> bool:
        if self._assume_yes:
            return True
        return click.confirm(prompt, default=default)

    def subscribe_to_saves(self, callback: Callable[[Path], None]) -> Callable[[], None]:
        watcher = PollingSaveWatcher(self._source_file, interval_seconds=self._poll_interval)
        return watcher.start(callback)
