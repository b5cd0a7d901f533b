"""Build supervision domain exports."""

from .build_outcomes import BuildFailure, BuildOutcome, BuildSuccess, CapturedProcess
from .build_supervisor import BuildSpawnError, BuildSupervisor, ProcessSpawner, spawn_captured

__all__ = [
    "BuildFailure",
    "BuildOutcome",
    "BuildSuccess",
    "CapturedProcess",
    "BuildSpawnError",
    "BuildSupervisor",
    "ProcessSpawner",
    "spawn_captured",
]
