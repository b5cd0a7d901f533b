"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration, merge_settings, parse_settings
from .runtime_settings import (
    DEFAULT_FLAG_PROFILE,
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

__all__ = [
    "CompiledDirectRun",
    "CompiledStandard",
    "CompiledTwoPhase",
    "ExecutionMode",
    "ExecutionStrategy",
    "FlagProfile",
    "Interpreted",
    "LanguageProfile",
    "RunnerSettings",
    "TerminalSettings",
    "WatchSettings",
    "DEFAULT_FLAG_PROFILE",
    "FILE_PLACEHOLDER",
    "ConfigurationError",
    "load_configuration",
    "merge_settings",
    "parse_settings",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
