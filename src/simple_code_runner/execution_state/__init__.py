"""Execution state domain exports."""

from .state_models import (
    HISTORY_CAPACITY,
    ActiveProfileIndex,
    ExecutionState,
    HistoryEntry,
    LastBuildCache,
    RunHistory,
    WatchMode,
)

__all__ = [
    "HISTORY_CAPACITY",
    "ActiveProfileIndex",
    "ExecutionState",
    "HistoryEntry",
    "LastBuildCache",
    "RunHistory",
    "WatchMode",
]
