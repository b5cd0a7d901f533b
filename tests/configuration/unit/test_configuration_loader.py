"""Configuration loader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from simple_code_runner.configuration.loader import (
    ConfigurationError,
    load_configuration,
    merge_settings,
)
from simple_code_runner.configuration.runtime_settings import (
    CompiledDirectRun,
    CompiledStandard,
    CompiledTwoPhase,
    ExecutionMode,
    FlagProfile,
    Interpreted,
    TerminalSettings,
)


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_loads_built_in_defaults_without_override_file() -> None:
    settings = load_configuration()

    assert settings.build_dir == ".build"
    assert settings.test_dir == "tests"
    assert settings.input_file == "input.txt"
    assert settings.output_file == "output.txt"
    assert settings.show_time is True
    assert settings.clean_after_run is False
    assert settings.terminal == TerminalSettings(shell="bash", terminate_on_close=False)
    assert settings.watch.debounce_ms == 100
    assert settings.source_path is None


def test_default_runners_resolve_to_execution_strategies() -> None:
    runners = load_configuration().runners

    assert runners["cpp"].strategy == CompiledStandard(compiler_path="g++")
    assert [profile.name for profile in runners["cpp"].flag_profiles] == ["Debug", "O2", "Ofast"]
    assert runners["java"].strategy == CompiledTwoPhase(
        compiler_path="javac", post_build_run_template="java"
    )
    assert runners["go"].strategy == CompiledDirectRun(
        compiler_path="go", direct_run_template="go run $FILE"
    )
    assert runners["python"].strategy == Interpreted(invocation_template="python3 $FILE")
    assert runners["python"].mode is ExecutionMode.INTERPRETED
    assert runners["java"].flag_profiles == ()


def test_language_for_path_uses_registered_extensions() -> None:
    settings = load_configuration()

    assert settings.language_for_path("solution.cpp") == "cpp"
    assert settings.language_for_path("/tmp/Main.java") == "java"
    assert settings.language_for_path("script.PY") == "python"
    assert settings.language_for_path("notes.txt") is None
    assert settings.language_for_path("Makefile") is None


def test_yaml_override_deep_merges_over_defaults(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "runner.yaml",
        """
build_dir: out
terminal:
  shell: zsh
runners:
  python:
    command: "python3 -u $FILE"
  cpp:
    profiles:
      - name: Fast
        flags: "-O3"
""",
    )

    settings = load_configuration(config_path)

    assert settings.build_dir == "out"
    assert settings.test_dir == "tests"
    assert settings.terminal.shell == "zsh"
    assert settings.terminal.terminate_on_close is False
    assert settings.runners["python"].strategy == Interpreted("python3 -u $FILE")
    assert settings.runners["python"].extensions == (".py",)
    assert settings.runners["cpp"].flag_profiles == (FlagProfile(name="Fast", flags="-O3"),)
    assert settings.runners["cpp"].strategy == CompiledStandard(compiler_path="g++")
    assert settings.source_path == config_path


def test_override_can_register_a_new_language(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "runner.yaml",
        """
runners:
  echo-lang:
    type: interpreted
    command: "echo $FILE"
    extensions: ["echo"]
""",
    )

    settings = load_configuration(config_path)

    assert settings.runners["echo-lang"].strategy == Interpreted("echo $FILE")
    assert settings.language_for_path("a.echo") == "echo-lang"


def test_explicit_strategy_overrides_inference() -> None:
    settings = load_configuration(
        overrides={
            "runners": {
                "kotlin": {"strategy": "standard", "run_command": None},
            }
        }
    )

    assert settings.runners["kotlin"].strategy == CompiledStandard(compiler_path="kotlinc")


def test_empty_override_file_keeps_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "runner.yaml", "")

    settings = load_configuration(config_path)

    assert "cpp" in settings.runners


def test_missing_override_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "missing.yaml")


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "runner.yaml", "- just\n- a list\n")

    with pytest.raises(ConfigurationError, match="root must be a mapping"):
        load_configuration(config_path)


def test_malformed_yaml_is_reported(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "runner.yaml", "runners: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Failed to parse"):
        load_configuration(config_path)


@pytest.mark.parametrize(
    ("runner", "message"),
    [
        ({"type": "scripted", "command": "x $FILE"}, "must be 'compiled' or 'interpreted'"),
        ({"type": "interpreted", "command": "node main.js"}, r"\$FILE placeholder"),
        ({"type": "compiled"}, "compiler must be a string"),
        (
            {"type": "interpreted", "command": "x $FILE", "profiles": [{"name": "O2"}]},
            "only supported for compiled runners",
        ),
        (
            {"type": "compiled", "compiler": "cc", "profiles": [{"flags": "-O2"}]},
            r"profiles\[1\]\.name must be a string",
        ),
        (
            {"type": "compiled", "compiler": "cc", "strategy": "interpreted"},
            "does not match type",
        ),
    ],
)
def test_invalid_runner_definitions_are_rejected(runner: dict, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        load_configuration(overrides={"runners": {"broken": runner}})


def test_invalid_scalar_settings_are_rejected() -> None:
    with pytest.raises(ConfigurationError, match="show_time must be true or false"):
        load_configuration(overrides={"show_time": "yes"})
    with pytest.raises(ConfigurationError, match="watch.debounce_ms must be greater than zero"):
        load_configuration(overrides={"watch": {"debounce_ms": 0}})


def test_merge_settings_replaces_lists_and_merges_mappings() -> None:
    base = {"a": {"b": 1, "c": [1, 2]}, "d": 1}
    override = {"a": {"c": [3]}, "e": 2}

    merged = merge_settings(base, override)

    assert merged == {"a": {"b": 1, "c": [3]}, "d": 1, "e": 2}
    assert base == {"a": {"b": 1, "c": [1, 2]}, "d": 1}
