"""Filesystem helpers for staging.

Copy failures come in two kinds. If the source can't be stat'ed or opened,
or the destination can't be created, the file is skipped and staging goes
on. If reading or writing fails after both handles are open, the staged
tree is left incomplete and the error is fatal.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from releaser.core.result import Err, Ok, Result

__all__ = ["CopyError", "atomic_write_text", "copy_file", "remove_tree"]


@dataclass(frozen=True, slots=True)
class CopyError:
    """A single-file copy problem.

    Attributes:
        kind: ``skipped`` when a handle could not be opened (tolerated),
            ``failed`` when the byte copy itself broke (fatal).
        src: Source path.
        dst: Destination path.
        reason: OS error text.
    """

    kind: Literal["skipped", "failed"]
    src: Path
    dst: Path
    reason: str

    @property
    def is_fatal(self) -> bool:
        return self.kind == "failed"


def copy_file(src: Path, dst: Path) -> Result[None, CopyError]:
    """Copy ``src`` to ``dst`` byte for byte, creating parent directories."""
    try:
        if src.is_dir():
            return Err(CopyError("skipped", src, dst, "source is a directory"))
        source = src.open("rb")
    except OSError as e:
        return Err(CopyError("skipped", src, dst, str(e)))

    with source:
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            target = dst.open("wb")
        except OSError as e:
            return Err(CopyError("skipped", src, dst, str(e)))

        with target:
            try:
                shutil.copyfileobj(source, target)
            except OSError as e:
                return Err(CopyError("failed", src, dst, str(e)))
    return Ok(None)


def remove_tree(path: Path) -> None:
    """Delete a directory tree if present; a missing tree is not an error."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace.

    Newlines are written as given so generated scripts are byte-stable across
    platforms.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
