"""Session management entities."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

JobCommand = str | Sequence[str]
ExitCallback = Callable[[int], None]


class SessionError(Exception):
    """Raised when the session host cannot provide a buffer or window."""


@dataclass(frozen=True)
class SessionHandle:
    """Buffer and window that together host one execution session."""

    buffer_id: int
    window_id: int


class FloatingState(str, Enum):
    """Observable state of the persistent floating session."""

    CLOSED = "closed"
    HIDDEN = "hidden"
    VISIBLE = "visible"


class WindowKind(str, Enum):
    BOTTOM = "bottom"
    FLOATING = "floating"


class SessionHost(Protocol):
    """Host surface that owns buffers, windows and the jobs attached to them."""

    def create_buffer(self) -> int: ...

    def open_window(self, buffer_id: int, kind: WindowKind) -> int: ...

    def close_window(self, window_id: int) -> None: ...

    def is_window_valid(self, window_id: int) -> bool: ...

    def is_buffer_valid(self, buffer_id: int) -> bool: ...

    def start_job(self, buffer_id: int, command: JobCommand, on_exit: ExitCallback) -> None: ...

    def stop_job(self, buffer_id: int) -> None: ...
