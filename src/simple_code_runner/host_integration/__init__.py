"""Host integration exports."""

from .cli_host import CliHostContext
from .save_watcher import PollingSaveWatcher

__all__ = ["CliHostContext", "PollingSaveWatcher"]
