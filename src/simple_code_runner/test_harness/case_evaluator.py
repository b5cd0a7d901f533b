"""Test case discovery, execution and exact-match evaluation."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from .process_runner import CompletedRun, decode_output, run_redirected
from .testcase_models import CaseResult, CaseStatus, TestCase, TestRunResult

INPUT_SUFFIX = ".in"
EXPECTED_SUFFIX = ".out"

CaseRunner = Callable[[str, Path], CompletedRun]


class TestHarnessError(Exception):
    """Raised when the test environment is unusable (missing directory, no inputs)."""

    __test__ = False


class NoTestsFoundError(TestHarnessError):
    """Raised when the test directory holds no input files."""


def discover_test_cases(test_dir: Path | str) -> tuple[TestCase, ...]:
    """Pair every `*.in` file with its `*.out` sibling, sorted by file name."""
    directory = Path(test_dir)
    if not directory.is_dir():
        raise TestHarnessError(f"No {directory} directory found")

    inputs = sorted(
        (path for path in directory.iterdir() if path.is_file() and path.suffix == INPUT_SUFFIX),
        key=lambda path: path.name,
    )
    if not inputs:
        raise NoTestsFoundError(f"No *{INPUT_SUFFIX} test files found in {directory}")

    return tuple(
        TestCase(input_path=input_path, expected_output_path=_expected_path_for(input_path))
        for input_path in inputs
    )


def run_tests(
    test_dir: Path | str,
    command: str,
    *,
    case_runner: CaseRunner | None = None,
) -> TestRunResult:
    """Discover the cases in `test_dir` and evaluate `command` against each."""
    return run_test_cases(discover_test_cases(test_dir), command, case_runner=case_runner)


def run_test_cases(
    test_cases: Sequence[TestCase],
    command: str,
    *,
    case_runner: CaseRunner | None = None,
) -> TestRunResult:
    """Run every case one after another and aggregate the results."""
    runner = case_runner or _run_case
    results = tuple(evaluate_case(case, runner(command, case.input_path)) for case in test_cases)
    return TestRunResult(
        passed_count=sum(1 for result in results if result.status is CaseStatus.PASSED),
        total_count=len(results),
        per_case_messages=tuple(result.message for result in results),
        case_results=results,
    )


def evaluate_case(test_case: TestCase, completed: CompletedRun) -> CaseResult:
    """Score one case by output equality alone; the exit code is not considered."""
    actual = completed.stdout
    if test_case.expected_output_path is None:
        return CaseResult(
            test_case=test_case,
            status=CaseStatus.INDETERMINATE,
            message=f"… {test_case.name} (no expected {EXPECTED_SUFFIX} file)",
            actual_output=actual,
            exit_code=completed.exit_code,
        )

    expected = read_expected_output(test_case.expected_output_path)
    if actual == expected:
        return CaseResult(
            test_case=test_case,
            status=CaseStatus.PASSED,
            message=f"✓ {test_case.name} PASS",
            actual_output=actual,
            exit_code=completed.exit_code,
        )

    message = (
        f"✗ {test_case.name} FAIL\n"
        f"  expected: {_strip_final_newline(expected)}\n"
        f"  actual  : {_strip_final_newline(actual)}"
    )
    return CaseResult(
        test_case=test_case,
        status=CaseStatus.FAILED,
        message=message,
        actual_output=actual,
        exit_code=completed.exit_code,
    )


def read_expected_output(path: Path) -> str:
    """Read expected lines and join them with newlines plus exactly one trailing newline.

    Bytes are decoded the same way captured stdout is, and line endings are
    kept as written.
    """
    text = decode_output(path.read_bytes())
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return "\n".join(lines) + "\n"


def _expected_path_for(input_path: Path) -> Path | None:
    candidate = input_path.with_suffix(EXPECTED_SUFFIX)
    return candidate if candidate.is_file() else None


def _strip_final_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def _run_case(command: str, input_path: Path) -> CompletedRun:
    return run_redirected(command, input_path)
