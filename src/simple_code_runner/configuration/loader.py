"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .default_registry import default_settings
from .runtime_settings import (
    FILE_PLACEHOLDER,
    CompiledDirectRun,
    CompiledStandard,
    CompiledTwoPhase,
    ExecutionMode,
    ExecutionStrategy,
    FlagProfile,
    Interpreted,
    LanguageProfile,
    RunnerSettings,
    TerminalSettings,
    WatchSettings,
)

DEFAULT_OVERRIDE_FILENAME = "runner.yaml"

_STRATEGY_NAMES = ("interpreted", "standard", "direct_run", "two_phase")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> RunnerSettings:
    """Merge an optional YAML override file (and in-memory overrides) over the defaults."""
    merged = default_settings()
    path = Path(config_path) if config_path is not None else None
    if path is not None:
        merged = merge_settings(merged, _read_override_file(path))
    if overrides:
        merged = merge_settings(merged, overrides)
    return parse_settings(merged, source_path=path)


def merge_settings(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge `override` into `base`: mappings merge key by key, other values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = value
    return merged


def parse_settings(raw: Mapping[str, Any], *, source_path: Path | None = None) -> RunnerSettings:
    """Validate a merged settings mapping and build the frozen settings aggregate."""
    runners_section = _require_mapping(raw.get("runners"), "runners")
    runners = {
        str(language_id): _parse_runner(str(language_id), value)
        for language_id, value in runners_section.items()
    }
    return RunnerSettings(
        build_dir=_require_non_empty_string(raw.get("build_dir"), "build_dir"),
        test_dir=_require_non_empty_string(raw.get("test_dir"), "test_dir"),
        input_file=_require_non_empty_string(raw.get("input_file"), "input_file"),
        output_file=_require_non_empty_string(raw.get("output_file"), "output_file"),
        show_time=_require_bool(raw.get("show_time"), "show_time"),
        clean_after_run=_require_bool(raw.get("clean_after_run"), "clean_after_run"),
        terminal=_parse_terminal_section(raw.get("terminal")),
        watch=_parse_watch_section(raw.get("watch")),
        runners=runners,
        source_path=source_path,
    )


def _read_override_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")
    return parsed


def _parse_terminal_section(value: Any) -> TerminalSettings:
    section = _require_mapping(value, "terminal")
    return TerminalSettings(
        shell=_require_non_empty_string(section.get("shell"), "terminal.shell"),
        terminate_on_close=_require_bool(
            section.get("terminate_on_close"), "terminal.terminate_on_close"
        ),
    )


def _parse_watch_section(value: Any) -> WatchSettings:
    section = _require_mapping(value, "watch")
    return WatchSettings(
        debounce_ms=_require_positive_int(section.get("debounce_ms"), "watch.debounce_ms"),
        poll_interval_ms=_require_positive_int(
            section.get("poll_interval_ms"), "watch.poll_interval_ms"
        ),
    )


def _parse_runner(language_id: str, value: Any) -> LanguageProfile:
    label = f"runners.{language_id}"
    section = _require_mapping(value, label)
    strategy = _parse_strategy(section, label)
    flag_profiles = _parse_flag_profiles(section.get("profiles"), label)
    if flag_profiles and isinstance(strategy, Interpreted):
        raise ConfigurationError(f"{label}.profiles is only supported for compiled runners.")
    return LanguageProfile(
        language_id=language_id,
        strategy=strategy,
        flag_profiles=flag_profiles,
        extensions=_parse_extensions(section.get("extensions"), label),
    )


def _parse_strategy(section: Mapping[str, Any], label: str) -> ExecutionStrategy:
    mode_raw = _require_non_empty_string(section.get("type"), f"{label}.type").lower()
    try:
        mode = ExecutionMode(mode_raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{label}.type must be 'compiled' or 'interpreted', got '{mode_raw}'."
        ) from exc

    strategy_name = _optional_string(section.get("strategy"), f"{label}.strategy")
    if strategy_name is None:
        strategy_name = _infer_strategy_name(mode, section)
    if strategy_name not in _STRATEGY_NAMES:
        raise ConfigurationError(
            f"{label}.strategy must be one of {', '.join(_STRATEGY_NAMES)}."
        )
    if (strategy_name == "interpreted") != (mode is ExecutionMode.INTERPRETED):
        raise ConfigurationError(
            f"{label}.strategy '{strategy_name}' does not match type '{mode.value}'."
        )

    if strategy_name == "interpreted":
        return Interpreted(invocation_template=_require_template(section, "command", label))

    compiler = _require_non_empty_string(section.get("compiler"), f"{label}.compiler")
    if strategy_name == "direct_run":
        return CompiledDirectRun(
            compiler_path=compiler,
            direct_run_template=_require_template(section, "command", label),
        )
    if strategy_name == "two_phase":
        return CompiledTwoPhase(
            compiler_path=compiler,
            post_build_run_template=_require_non_empty_string(
                section.get("run_command"), f"{label}.run_command"
            ),
        )
    return CompiledStandard(compiler_path=compiler)


def _infer_strategy_name(mode: ExecutionMode, section: Mapping[str, Any]) -> str:
    if mode is ExecutionMode.INTERPRETED:
        return "interpreted"
    if section.get("command"):
        return "direct_run"
    if section.get("run_command"):
        return "two_phase"
    return "standard"


def _require_template(section: Mapping[str, Any], key: str, label: str) -> str:
    template = _require_non_empty_string(section.get(key), f"{label}.{key}")
    if FILE_PLACEHOLDER not in template:
        raise ConfigurationError(f"{label}.{key} must contain the {FILE_PLACEHOLDER} placeholder.")
    return template


def _parse_flag_profiles(value: Any, label: str) -> tuple[FlagProfile, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError(f"{label}.profiles must be a list of mappings.")
    profiles: list[FlagProfile] = []
    for position, item in enumerate(value, start=1):
        entry = _require_mapping(item, f"{label}.profiles[{position}]")
        name = _require_non_empty_string(entry.get("name"), f"{label}.profiles[{position}].name")
        flags = entry.get("flags", "")
        if flags is None:
            flags = ""
        if not isinstance(flags, str):
            raise ConfigurationError(f"{label}.profiles[{position}].flags must be a string.")
        profiles.append(FlagProfile(name=name, flags=flags.strip()))
    return tuple(profiles)


def _parse_extensions(value: Any, label: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Sequence):
        raise ConfigurationError(f"{label}.extensions must be a string or list of strings.")
    extensions: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(f"{label}.extensions entries must be strings.")
        stripped = item.strip().lower()
        if stripped:
            extensions.append(stripped if stripped.startswith(".") else f".{stripped}")
    return tuple(extensions)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value

