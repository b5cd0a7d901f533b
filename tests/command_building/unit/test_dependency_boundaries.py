"""Boundary tests for the process-free core modules."""

from __future__ import annotations

from pathlib import Path


def _package_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "src" / "simple_code_runner"


def test_command_building_and_test_evaluation_stay_free_of_hosts_and_sessions() -> None:
    core_modules = (
        _package_dir() / "command_building" / "command_builder.py",
        _package_dir() / "command_building" / "command_plans.py",
        _package_dir() / "test_harness" / "case_evaluator.py",
        _package_dir() / "test_harness" / "testcase_models.py",
    )
    forbidden_import_fragments = (
        "simple_code_runner.session_management",
        "simple_code_runner.run_execution",
        "simple_code_runner.host_integration",
        "import click",
        "import asyncio",
    )

    for module_path in core_modules:
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden core dependency in {module_path}: {fragment}"
