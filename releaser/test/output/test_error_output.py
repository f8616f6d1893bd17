from __future__ import annotations

from pathlib import Path

import pytest

from releaser.core.config import ConfigError
from releaser.core.errors import ErrorCode
from releaser.core.ignore import IgnoreFileError
from releaser.output.console import MockConsole, Style
from releaser.output.errors import print_release_error, release_error_exit_code
from releaser.services.errors import (
    CompilerFailed,
    CopyFailed,
    ReleaseError,
    ScriptWriteFailed,
    WorkDirFailed,
)

ERRORS: list[tuple[ReleaseError, str]] = [
    (ConfigError("Config file not found: config.json", Path("config.json")), "not found"),
    (IgnoreFileError("Ignore file not found: ignore.txt", Path("ignore.txt")), "ignore.txt"),
    (WorkDirFailed(Path("/out/App"), "permission denied"), "create dir failed"),
    (CopyFailed(Path("/b/a.dll"), Path("/w/a.dll"), "disk full"), "copy failed"),
    (ScriptWriteFailed(Path("/out/App_1.iss"), "read-only"), "create iss file failed"),
    (CompilerFailed(Path("/out/App_1.iss"), 2, ""), "create setup file failed"),
]


@pytest.mark.parametrize(("error", "expected"), ERRORS)
def test_each_error_prints_one_error_line(error: ReleaseError, expected: str) -> None:
    console = MockConsole()
    print_release_error(error, console)

    assert console.count(Style.ERROR) == 1
    assert console.find(expected)


@pytest.mark.parametrize(("error", "expected"), ERRORS)
def test_every_error_is_fatal(error: ReleaseError, expected: str) -> None:
    assert release_error_exit_code(error) == int(ErrorCode.FATAL) == 1


def test_compiler_output_is_surfaced() -> None:
    console = MockConsole()
    error = CompilerFailed(Path("/out/App_1.iss"), 2, "Error on line 12: Unknown directive\n")

    print_release_error(error, console)

    dim = [o for o in console.outputs if o.style == Style.DIM]
    assert [o.message for o in dim] == ["Error on line 12: Unknown directive"]
    assert console.outputs[0].fields["exit"] == 2
