"""Subprocess execution with Result-based error handling.

Usage:
    result = run([compiler, f"/O{output_dir}", str(script)], cwd=Path("."))
    match result:
        case Ok(output):
            ...
        case Err(error):
            print(error.output)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from releaser.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process could not be started.
        output: Combined stdout and stderr, or the OS error text.
    """

    command: tuple[str, ...]
    returncode: int
    output: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its combined output.

    There is no timeout: a command that never exits blocks the caller.

    Returns:
        Ok(output) on exit code 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, output=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, output=proc.stdout or "")
        )

    return Ok(proc.stdout or "")
