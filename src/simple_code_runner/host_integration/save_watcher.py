"""File-save detection by polling modification times on the event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

_LOGGER = logging.getLogger(__name__)


class PollingSaveWatcher:
    """Reports a save whenever the watched file's modification time changes."""

    def __init__(self, path: Path, *, interval_seconds: float = 0.25) -> None:
        self._path = path
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable[[Path], None]) -> Callable[[], None]:
        """Begin polling; the returned callable stops it."""
        if self.running:
            raise RuntimeError(f"Already watching {self._path}")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._poll(callback))
        return self.stop

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _poll(self, callback: Callable[[Path], None]) -> None:
        last_seen = self._modified_ns()
        while True:
            await asyncio.sleep(self._interval)
            current = self._modified_ns()
            if current is not None and current != last_seen:
                _LOGGER.debug("detected save of %s", self._path)
                callback(self._path)
            last_seen = current

    def _modified_ns(self) -> int | None:
        try:
            return self._path.stat().st_mtime_ns
        except FileNotFoundError:
            return None
