from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from releaser.core.config import ConfigError
from releaser.core.ignore import IgnoreFileError


@dataclass(frozen=True, slots=True)
class WorkDirFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class CopyFailed:
    src: Path
    dst: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ScriptWriteFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class CompilerFailed:
    script: Path
    returncode: int
    output: str


@dataclass(frozen=True, slots=True)
class StageWarning:
    """A tolerated problem: logged, collected, and the run goes on."""

    app: str
    message: str
    path: Path | None = None


# Any of these aborts the run.
ReleaseError = (
    ConfigError
    | IgnoreFileError
    | WorkDirFailed
    | CopyFailed
    | ScriptWriteFailed
    | CompilerFailed
)
