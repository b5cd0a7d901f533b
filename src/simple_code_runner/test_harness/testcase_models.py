"""Test harness entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CaseStatus(str, Enum):
    """Outcome of one test case."""

    PASSED = "passed"
    FAILED = "failed"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class TestCase:
    """Input file paired with its same-stem expected-output file, if one exists."""

    __test__ = False

    input_path: Path
    expected_output_path: Path | None

    @property
    def name(self) -> str:
        return self.input_path.name


@dataclass(frozen=True)
class CaseResult:
    """Evaluation of one test case against the program's actual output."""

    test_case: TestCase
    status: CaseStatus
    message: str
    actual_output: str
    exit_code: int


@dataclass(frozen=True)
class TestRunResult:
    """Aggregate over all discovered cases of one harness invocation."""

    __test__ = False

    passed_count: int
    total_count: int
    per_case_messages: tuple[str, ...]
    case_results: tuple[CaseResult, ...] = ()

    @property
    def failed_count(self) -> int:
        return sum(1 for result in self.case_results if result.status is CaseStatus.FAILED)

    @property
    def indeterminate_count(self) -> int:
        return sum(
            1 for result in self.case_results if result.status is CaseStatus.INDETERMINATE
        )

    @property
    def all_passed(self) -> bool:
        """True only if every case, indeterminate ones included, passed."""
        return self.passed_count == self.total_count
