"""Session host that attaches jobs to the controlling terminal."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field

from .session_models import ExitCallback, JobCommand, SessionError, WindowKind

_LOGGER = logging.getLogger(__name__)

_SPAWN_FAILED_EXIT_CODE = 127


@dataclass
class _TerminalBuffer:
    task: asyncio.Task[None] | None = None
    process: asyncio.subprocess.Process | None = None
    finished: bool = False
    windows: set[int] = field(default_factory=set)


class TerminalSessionHost:
    """Runs session jobs as subprocesses sharing this process's stdin/stdout/stderr.

    Windows are logical: a terminal cannot split, so a window only marks which
    buffer is currently shown. A buffer and its windows are dropped as soon as
    its job exits.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._buffers: dict[int, _TerminalBuffer] = {}
        self._windows: dict[int, int] = {}

    def create_buffer(self) -> int:
        buffer_id = next(self._ids)
        self._buffers[buffer_id] = _TerminalBuffer()
        return buffer_id

    def open_window(self, buffer_id: int, kind: WindowKind) -> int:
        buffer = self._buffers.get(buffer_id)
        if buffer is None:
            raise SessionError(f"Unknown session buffer: {buffer_id}")
        window_id = next(self._ids)
        self._windows[window_id] = buffer_id
        buffer.windows.add(window_id)
        _LOGGER.debug("opened %s window %s for buffer %s", kind.value, window_id, buffer_id)
        return window_id

    def close_window(self, window_id: int) -> None:
        buffer_id = self._windows.pop(window_id, None)
        if buffer_id is not None and buffer_id in self._buffers:
            self._buffers[buffer_id].windows.discard(window_id)

    def is_window_valid(self, window_id: int) -> bool:
        return window_id in self._windows

    def is_buffer_valid(self, buffer_id: int) -> bool:
        buffer = self._buffers.get(buffer_id)
        return buffer is not None and not buffer.finished

    def start_job(self, buffer_id: int, command: JobCommand, on_exit: ExitCallback) -> None:
        buffer = self._buffers.get(buffer_id)
        if buffer is None:
            raise SessionError(f"Unknown session buffer: {buffer_id}")
        if buffer.task is not None:
            raise SessionError(f"Session buffer {buffer_id} already runs a job.")
        loop = asyncio.get_running_loop()
        buffer.task = loop.create_task(self._run_job(buffer_id, buffer, command, on_exit))

    def stop_job(self, buffer_id: int) -> None:
        buffer = self._buffers.get(buffer_id)
        if buffer is None or buffer.process is None or buffer.finished:
            return
        if buffer.process.returncode is None:
            _LOGGER.debug("terminating job in buffer %s", buffer_id)
            buffer.process.terminate()

    async def _run_job(
        self,
        buffer_id: int,
        buffer: _TerminalBuffer,
        command: JobCommand,
        on_exit: ExitCallback,
    ) -> None:
        try:
            if isinstance(command, str):
                buffer.process = await asyncio.create_subprocess_shell(command)
            else:
                buffer.process = await asyncio.create_subprocess_exec(*command)
        except OSError as exc:
            _LOGGER.warning("session job failed to start: %s", exc)
            self._release(buffer_id)
            on_exit(_SPAWN_FAILED_EXIT_CODE)
            return

        exit_code = await buffer.process.wait()
        self._release(buffer_id)
        on_exit(exit_code)

    def _release(self, buffer_id: int) -> None:
        # a finished job takes its buffer and every window showing it along
        buffer = self._buffers.pop(buffer_id, None)
        if buffer is None:
            return
        buffer.finished = True
        for window_id in buffer.windows:
            self._windows.pop(window_id, None)
        _LOGGER.debug("released buffer %s", buffer_id)
