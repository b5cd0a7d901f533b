"""Run execution domain exports."""

from .orchestration_engine import COMMAND_NAMES, OrchestrationEngine
from .run_contracts import HostContext, NotificationLevel, RunExecutionError, RunTarget

__all__ = [
    "COMMAND_NAMES",
    "HostContext",
    "NotificationLevel",
    "OrchestrationEngine",
    "RunExecutionError",
    "RunTarget",
]
