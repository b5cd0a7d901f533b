"""Results writing domain exports."""

from .report_formatter import (
    HISTORY_TITLE,
    render_build_failure,
    render_elapsed,
    render_history,
    render_test_report,
)

__all__ = [
    "HISTORY_TITLE",
    "render_build_failure",
    "render_elapsed",
    "render_history",
    "render_test_report",
]
