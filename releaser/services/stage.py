"""Staging of an application's build output into its work directory.

Every pass starts from scratch: the work directory is deleted, recreated,
and filled with the non-ignored regular files of the build tree at the same
relative paths. Staging the same build twice gives the same tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..core.config import AppSpec
from ..core.ignore import IgnoreList
from ..core.result import Err, Ok, Result
from ..output.console import ConsoleProtocol
from ..platform.files import copy_file, remove_tree
from .errors import CopyFailed, ReleaseError, StageWarning, WorkDirFailed

__all__ = ["VCREDIST_FILE", "StagedApp", "iter_build_files", "stage_app"]

VCREDIST_FILE = "vcredist_x64.exe"


def _empty_warnings() -> list[StageWarning]:
    return []


@dataclass(frozen=True, slots=True)
class StagedApp:
    """Outcome of staging one application.

    Attributes:
        app: The staged application.
        copied: Staged files as posix paths relative to the work directory.
        ignored: Number of build files excluded by the ignore list.
        vcredist_staged: True when the runtime installer sits in the work
            directory. The generated script only checks for the runtime then.
        warnings: Tolerated problems met while staging.
    """

    app: AppSpec
    copied: tuple[str, ...] = ()
    ignored: int = 0
    vcredist_staged: bool = False
    warnings: list[StageWarning] = field(default_factory=_empty_warnings)

    @property
    def work_path(self) -> Path:
        return Path(self.app.work_path)


def iter_build_files(build_path: Path) -> list[Path]:
    """Regular files under ``build_path``, recursively, in sorted order."""
    if not build_path.is_dir():
        return []
    return [p for p in sorted(build_path.rglob("*")) if not p.is_dir()]


def _reset_work_dir(work_path: Path, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    console.info("remove dir", path=work_path)
    try:
        remove_tree(work_path)
    except OSError as e:
        return Err(WorkDirFailed(path=work_path, reason=str(e)))

    console.info("create dir", path=work_path)
    try:
        work_path.mkdir(parents=True)
    except OSError as e:
        return Err(WorkDirFailed(path=work_path, reason=str(e)))
    return Ok(None)


def stage_app(
    app: AppSpec,
    ignore: IgnoreList,
    *,
    console: ConsoleProtocol,
    cwd: Path | None = None,
) -> Result[StagedApp, ReleaseError]:
    """Recreate the work directory and copy the filtered build tree into it.

    ``cwd`` is where the runtime redistributable installer is looked up.

    Returns:
        Ok(StagedApp) on success, Err(ReleaseError) on a fatal problem.
    """
    build_path = Path(app.build_path)
    work_path = Path(app.work_path)
    warnings: list[StageWarning] = []

    reset = _reset_work_dir(work_path, console)
    if isinstance(reset, Err):
        return reset

    console.info("copy files", src=build_path, dst=work_path)
    if not build_path.is_dir():
        warnings.append(StageWarning(app.name, "build path not found", build_path))
        console.warning("build path not found", path=build_path)

    copied: list[str] = []
    ignored = 0
    for src in iter_build_files(build_path):
        if ignore.should_ignore(src.as_posix()):
            ignored += 1
            continue

        rel = src.relative_to(build_path).as_posix()
        match copy_file(src, work_path / rel):
            case Ok():
                copied.append(rel)
            case Err(error) if error.is_fatal:
                return Err(CopyFailed(src=error.src, dst=error.dst, reason=error.reason))
            case Err(error):
                warnings.append(StageWarning(app.name, f"skipped: {error.reason}", error.src))
                console.warning("skip file", path=error.src, reason=error.reason)

    vcredist_staged = False
    if app.vcredist:
        vcredist = (cwd if cwd is not None else Path.cwd()) / VCREDIST_FILE
        if vcredist.is_file():
            match copy_file(vcredist, work_path / VCREDIST_FILE):
                case Ok():
                    vcredist_staged = True
                case Err(error) if error.is_fatal:
                    return Err(CopyFailed(src=error.src, dst=error.dst, reason=error.reason))
                case Err(error):
                    warnings.append(StageWarning(app.name, f"skipped: {error.reason}", vcredist))
                    console.warning("skip file", path=vcredist, reason=error.reason)
        else:
            warnings.append(StageWarning(app.name, "can not find file", vcredist))
            console.warning("can not find file", file=vcredist, app=app.name)

    console.info("copy files ok", files=len(copied), ignored=ignored)
    return Ok(
        StagedApp(
            app=app,
            copied=tuple(copied),
            ignored=ignored,
            vcredist_staged=vcredist_staged,
            warnings=warnings,
        )
    )
