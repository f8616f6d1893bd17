"""Fatal error presentation.

Every fatal error maps to one message and to ``ErrorCode.FATAL``; the
command line only distinguishes success from abort.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from releaser.core.config import ConfigError
from releaser.core.errors import ErrorCode
from releaser.core.ignore import IgnoreFileError
from releaser.output.console import Style
from releaser.services.errors import (
    CompilerFailed,
    CopyFailed,
    ReleaseError,
    ScriptWriteFailed,
    WorkDirFailed,
)

if TYPE_CHECKING:
    from releaser.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a fatal error, including compiler output when there is any."""
    match error:
        case ConfigError(message=message, path=path):
            console.error(message, path=path)
        case IgnoreFileError(message=message, path=path):
            console.error(message, path=path)
        case WorkDirFailed(path=path, reason=reason):
            console.error("create dir failed", path=path, reason=reason)
        case CopyFailed(src=src, dst=dst, reason=reason):
            console.error("copy failed", src=src, dst=dst, reason=reason)
        case ScriptWriteFailed(path=path, reason=reason):
            console.error("create iss file failed", path=path, reason=reason)
        case CompilerFailed(script=script, returncode=rc, output=output):
            console.error("create setup file failed", script=script, exit=rc)
            if output.strip():
                console.print(output.rstrip(), Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    return int(ErrorCode.FATAL)
