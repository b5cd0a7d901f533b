"""Synchronous execution of a shell command with redirected standard streams."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletedRun:
    """Exit code and captured standard output of one finished command."""

    exit_code: int
    stdout: str


def decode_output(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def run_redirected(
    command: str,
    input_path: Path | str,
    output_path: Path | str | None = None,
) -> CompletedRun:
    """Run `command` with stdin read from `input_path`, blocking until it exits.

    Standard output is captured unless `output_path` is given, in which case it
    is written to that file and the returned `stdout` is empty.
    """
    _LOGGER.debug("running %s < %s", command, input_path)
    with Path(input_path).open("rb") as stdin:
        if output_path is not None:
            with Path(output_path).open("wb") as stdout:
                completed = subprocess.run(
                    command,
                    shell=True,
                    stdin=stdin,
                    stdout=stdout,
                    stderr=subprocess.DEVNULL,
                    check=False,
                )
            return CompletedRun(exit_code=completed.returncode, stdout="")
        completed = subprocess.run(
            command,
            shell=True,
            stdin=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    return CompletedRun(
        exit_code=completed.returncode,
        stdout=decode_output(completed.stdout),
    )
