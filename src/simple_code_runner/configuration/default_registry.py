"""Built-in runner defaults that a user override file is merged over."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

_DEFAULT_SETTINGS: dict[str, Any] = {
    # Relative to the working directory; created on demand.
    "build_dir": ".build",
    # Holds `*.in` inputs and same-stem `*.out` expected outputs.
    "test_dir": "tests",
    "input_file": "input.txt",
    "output_file": "output.txt",
    "show_time": True,
    "clean_after_run": False,
    "terminal": {
        "shell": "bash",
        "terminate_on_close": False,
    },
    "watch": {
        "debounce_ms": 100,
        "poll_interval_ms": 250,
    },
    "runners": {
        "cpp": {
            "type": "compiled",
            "compiler": "g++",
            "extensions": [".cpp", ".cc", ".cxx"],
            "profiles": [
                {"name": "Debug", "flags": "-std=c++17 -g -Wall -Wextra -Wshadow -pedantic"},
                {"name": "O2", "flags": "-std=c++17 -O2 -Wall -Wextra -Wshadow -pedantic"},
                {
                    "name": "Ofast",
                    "flags": "-std=c++17 -Ofast -march=native -DNDEBUG -Wall -Wextra -Wshadow",
                },
            ],
        },
        "c": {
            "type": "compiled",
            "compiler": "gcc",
            "extensions": [".c"],
            "profiles": [
                {"name": "Debug", "flags": "-g -Wall -Wextra -pedantic"},
                {"name": "O2", "flags": "-O2 -Wall -Wextra -pedantic"},
                {"name": "Ofast", "flags": "-Ofast -march=native -DNDEBUG -Wall -Wextra"},
            ],
        },
        "rust": {
            "type": "compiled",
            "compiler": "rustc",
            "extensions": [".rs"],
            "profiles": [
                {"name": "Debug", "flags": ""},
                {"name": "Release", "flags": "-C opt-level=3"},
            ],
        },
        "java": {
            "type": "compiled",
            "compiler": "javac",
            "run_command": "java",
            "extensions": [".java"],
        },
        "haskell": {
            "type": "compiled",
            "compiler": "ghc",
            "extensions": [".hs"],
            "profiles": [
                {"name": "Debug", "flags": ""},
                {"name": "O2", "flags": "-O2"},
            ],
        },
        "kotlin": {
            "type": "compiled",
            "compiler": "kotlinc",
            "run_command": "kotlin",
            "extensions": [".kt"],
        },
        "d": {
            "type": "compiled",
            "compiler": "dmd",
            "extensions": [".d"],
            "profiles": [
                {"name": "Debug", "flags": "-g"},
                {"name": "Release", "flags": "-O -release"},
            ],
        },
        # compile-and-run in a single command
        "go": {
            "type": "compiled",
            "compiler": "go",
            "command": "go run $FILE",
            "extensions": [".go"],
        },
        "nim": {
            "type": "compiled",
            "compiler": "nim",
            "command": "nim c -r $FILE",
            "extensions": [".nim"],
        },
        "zig": {
            "type": "compiled",
            "compiler": "zig",
            "command": "zig run $FILE",
            "extensions": [".zig"],
        },
        "python": {"type": "interpreted", "command": "python3 $FILE", "extensions": [".py"]},
        "javascript": {
            "type": "interpreted",
            "command": "node $FILE",
            "extensions": [".js", ".mjs"],
        },
        "typescript": {"type": "interpreted", "command": "ts-node $FILE", "extensions": [".ts"]},
        "lua": {"type": "interpreted", "command": "lua $FILE", "extensions": [".lua"]},
        "ruby": {"type": "interpreted", "command": "ruby $FILE", "extensions": [".rb"]},
        "perl": {"type": "interpreted", "command": "perl $FILE", "extensions": [".pl"]},
        "php": {"type": "interpreted", "command": "php $FILE", "extensions": [".php"]},
        "sh": {"type": "interpreted", "command": "bash $FILE", "extensions": [".sh"]},
        "bash": {"type": "interpreted", "command": "bash $FILE", "extensions": [".bash"]},
        "zsh": {"type": "interpreted", "command": "zsh $FILE", "extensions": [".zsh"]},
        "r": {"type": "interpreted", "command": "Rscript $FILE", "extensions": [".r"]},
        "julia": {"type": "interpreted", "command": "julia $FILE", "extensions": [".jl"]},
        "swift": {"type": "interpreted", "command": "swift $FILE", "extensions": [".swift"]},
        "dart": {"type": "interpreted", "command": "dart run $FILE", "extensions": [".dart"]},
        "elixir": {"type": "interpreted", "command": "elixir $FILE", "extensions": [".exs"]},
        "ocaml": {"type": "interpreted", "command": "ocaml $FILE", "extensions": [".ml"]},
        "scala": {"type": "interpreted", "command": "scala $FILE", "extensions": [".scala"]},
    },
}


def default_settings() -> dict[str, Any]:
    """Return a fresh copy of the built-in settings mapping."""
    return deepcopy(_DEFAULT_SETTINGS)
