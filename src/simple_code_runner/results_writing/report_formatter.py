"""User-facing text for build, test and history reports."""

from __future__ import annotations

from collections.abc import Sequence

from simple_code_runner.build_supervision import BuildFailure
from simple_code_runner.execution_state import HistoryEntry
from simple_code_runner.test_harness import TestRunResult

HISTORY_TITLE = "📊 Run History (Last 10):"
_HISTORY_RULE = "═" * 27


def render_build_failure(failure: BuildFailure) -> str:
    """Exit code header followed by every captured diagnostic line."""
    message = f"Build failed (exit code {failure.exit_code})"
    if failure.diagnostics:
        message += ":\n" + "\n".join(failure.diagnostics)
    return message


def render_test_report(result: TestRunResult) -> str:
    lines = list(result.per_case_messages)
    lines.append(f"\nResult: {result.passed_count}/{result.total_count} passed")
    return "\n".join(lines)


def render_elapsed(elapsed_seconds: float) -> str:
    return f"✓ Execution completed in {elapsed_seconds:.3f}s"


def render_history(entries: Sequence[HistoryEntry]) -> str:
    if not entries:
        return "No run history yet"
    lines = [HISTORY_TITLE, _HISTORY_RULE]
    for position, entry in enumerate(entries, start=1):
        lines.append(
            f"{position}. [{entry.timestamp}] {entry.file_name} "
            f"({entry.language_id}) - {entry.elapsed_seconds:.3f}s"
        )
    return "\n".join(lines)
