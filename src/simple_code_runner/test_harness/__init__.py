"""Test harness domain exports."""

from .case_evaluator import (
    EXPECTED_SUFFIX,
    INPUT_SUFFIX,
    NoTestsFoundError,
    TestHarnessError,
    discover_test_cases,
    evaluate_case,
    read_expected_output,
    run_test_cases,
    run_tests,
)
from .process_runner import CompletedRun, run_redirected
from .testcase_models import CaseResult, CaseStatus, TestCase, TestRunResult

__all__ = [
    "CaseResult",
    "CaseStatus",
    "CompletedRun",
    "EXPECTED_SUFFIX",
    "INPUT_SUFFIX",
    "NoTestsFoundError",
    "TestCase",
    "TestHarnessError",
    "TestRunResult",
    "discover_test_cases",
    "evaluate_case",
    "read_expected_output",
    "run_redirected",
    "run_test_cases",
    "run_tests",
]
