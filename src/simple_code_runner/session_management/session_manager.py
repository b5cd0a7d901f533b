"""Bottom and floating execution sessions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .session_models import (
    ExitCallback,
    FloatingState,
    JobCommand,
    SessionHandle,
    SessionHost,
    WindowKind,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Absent:
    pass


@dataclass(frozen=True)
class _Valid:
    handle: SessionHandle


_BottomState = _Absent | _Valid

_ABSENT = _Absent()


class SessionManager:
    """Owns at most one bottom session and at most one persistent floating session."""

    def __init__(
        self,
        host: SessionHost,
        *,
        shell: str = "bash",
        terminate_on_close: bool = False,
    ) -> None:
        self._host = host
        self._shell = shell
        self._terminate_on_close = terminate_on_close
        self._bottom: _BottomState = _ABSENT
        self._float_buffer: int | None = None
        self._float_window: int | None = None
        self._pending: set[asyncio.Future[int]] = set()

    @property
    def bottom_handle(self) -> SessionHandle | None:
        """Currently valid bottom session handle, if any."""
        if isinstance(self._bottom, _Valid) and self._host.is_window_valid(
            self._bottom.handle.window_id
        ):
            return self._bottom.handle
        return None

    @property
    def floating_state(self) -> FloatingState:
        if self._float_window is not None and self._host.is_window_valid(self._float_window):
            return FloatingState.VISIBLE
        if self._float_buffer is not None and self._host.is_buffer_valid(self._float_buffer):
            return FloatingState.HIDDEN
        return FloatingState.CLOSED

    def run_in_bottom_session(
        self,
        command: str,
        on_complete: Callable[[int], None] | None = None,
    ) -> SessionHandle:
        """Close any previous bottom session, open a fresh one and start `command` in it.

        `on_complete` receives the exit code once, scheduled on the event loop
        after the process terminates.
        """
        handle = self._acquire_bottom()
        self._start(handle.buffer_id, command, on_complete)
        return handle

    def run_in_floating_session(self, command: str | None = None) -> SessionHandle:
        """Open a disposable floating session; it is never reused."""
        buffer_id = self._host.create_buffer()
        window_id = self._host.open_window(buffer_id, WindowKind.FLOATING)
        self._start(buffer_id, self._shell_command(command), None)
        return SessionHandle(buffer_id=buffer_id, window_id=window_id)

    def toggle_floating_session(self) -> FloatingState:
        """Hide, re-show or create the persistent floating shell; return the new state."""
        state = self.floating_state
        if state is FloatingState.VISIBLE:
            assert self._float_window is not None
            self._host.close_window(self._float_window)
            self._float_window = None
            _LOGGER.debug("floating session hidden")
            return FloatingState.HIDDEN
        if state is FloatingState.HIDDEN:
            assert self._float_buffer is not None
            self._float_window = self._host.open_window(self._float_buffer, WindowKind.FLOATING)
            _LOGGER.debug("floating session shown again")
            return FloatingState.VISIBLE

        buffer_id = self._host.create_buffer()
        self._float_buffer = buffer_id
        self._float_window = self._host.open_window(buffer_id, WindowKind.FLOATING)
        self._start(buffer_id, self._shell_command(None), None)
        _LOGGER.debug("floating session created")
        return FloatingState.VISIBLE

    async def drain(self) -> None:
        """Wait until every job started through this manager has exited."""
        while self._pending:
            await asyncio.gather(*tuple(self._pending), return_exceptions=True)

    def _acquire_bottom(self) -> SessionHandle:
        if isinstance(self._bottom, _Valid):
            previous = self._bottom.handle
            self._bottom = _ABSENT
            if self._host.is_window_valid(previous.window_id):
                self._host.close_window(previous.window_id)
            if self._terminate_on_close:
                self._host.stop_job(previous.buffer_id)
            _LOGGER.debug("closed bottom session %s", previous)

        buffer_id = self._host.create_buffer()
        window_id = self._host.open_window(buffer_id, WindowKind.BOTTOM)
        handle = SessionHandle(buffer_id=buffer_id, window_id=window_id)
        self._bottom = _Valid(handle)
        _LOGGER.debug("opened bottom session %s", handle)
        return handle

    def _start(
        self,
        buffer_id: int,
        command: JobCommand,
        on_complete: Callable[[int], None] | None,
    ) -> None:
        loop = asyncio.get_running_loop()
        finished: asyncio.Future[int] = loop.create_future()
        self._pending.add(finished)
        self._host.start_job(buffer_id, command, self._exit_handler(loop, finished, on_complete))

    def _exit_handler(
        self,
        loop: asyncio.AbstractEventLoop,
        finished: asyncio.Future[int],
        on_complete: Callable[[int], None] | None,
    ) -> ExitCallback:
        def _complete(exit_code: int) -> None:
            try:
                if on_complete is not None:
                    on_complete(exit_code)
            finally:
                self._pending.discard(finished)
                if not finished.done():
                    finished.set_result(exit_code)

        def _on_exit(exit_code: int) -> None:
            loop.call_soon_threadsafe(_complete, exit_code)

        return _on_exit

    def _shell_command(self, command: str | None) -> list[str]:
        if command:
            return [self._shell, "--noprofile", "-c", f"{command}; exec {self._shell}"]
        return [self._shell, "--noprofile"]
