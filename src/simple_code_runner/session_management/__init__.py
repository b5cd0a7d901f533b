"""Session management domain exports."""

from .session_manager import SessionManager
from .session_models import (
    FloatingState,
    JobCommand,
    SessionError,
    SessionHandle,
    SessionHost,
    WindowKind,
)
from .terminal_host import TerminalSessionHost

__all__ = [
    "FloatingState",
    "JobCommand",
    "SessionError",
    "SessionHandle",
    "SessionHost",
    "SessionManager",
    "TerminalSessionHost",
    "WindowKind",
]
