"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from simple_code_runner.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from simple_code_runner.configuration.loader import load_configuration


def test_build_placeholder_configuration_mentions_every_strategy() -> None:
    scaffold = build_placeholder_configuration()

    assert "Runner override file" in scaffold
    assert "runners:" in scaffold
    assert "profiles:" in scaffold
    assert "run_command:" in scaffold
    assert "$FILE" in scaffold
    assert "terminate_on_close" in scaffold


def test_written_scaffold_loads_as_valid_configuration(tmp_path: Path) -> None:
    output_path = tmp_path / "runner.yaml"

    written_path = write_placeholder_configuration(output_path)
    settings = load_configuration(written_path)

    assert written_path == output_path.resolve()
    assert settings.runners["python"].extensions == (".py",)


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "runner.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
