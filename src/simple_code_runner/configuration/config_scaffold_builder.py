"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

from .loader import DEFAULT_OVERRIDE_FILENAME

DEFAULT_CONFIG_FILENAME = DEFAULT_OVERRIDE_FILENAME

_CONFIG_SCAFFOLD_TEMPLATE = """# Runner override file for simple-code-runner.
# Every key is optional: values here are deep-merged over the built-in defaults.
# Mappings merge key by key; lists and scalars replace the default value.

# build_dir: ".build"
# test_dir: "tests"
# input_file: "input.txt"
# output_file: "output.txt"
# show_time: true
# clean_after_run: false

# terminal:
#   shell: "bash"
#   # Stop the previous program when a new run replaces its session.
#   terminate_on_close: false

# watch:
#   debounce_ms: 100
#   poll_interval_ms: 250

runners:
  # Compiled language: `compiler` plus optional named flag profiles.
  # cpp:
  #   profiles:
  #     - name: "Debug"
  #       flags: "-std=c++20 -g"
  #     - name: "Release"
  #       flags: "-std=c++20 -O2"

  # Compiled language that compiles and runs in one step ($FILE is the source path).
  # go:
  #   command: "go run $FILE"

  # Two-phase toolchain: compile into build_dir, then `cd build_dir && <run_command> <base>`.
  # java:
  #   run_command: "java"

  # Interpreted language ($FILE is replaced with the absolute source path).
  python:
    command: "python3 $FILE"
"""


def build_placeholder_configuration() -> str:
    """Build a commented YAML override file showing every supported section."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the override scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Runner configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
