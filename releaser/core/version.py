"""Release version resolution.

The configured ``version`` is either a literal (``"2.0.0"``) or the path of a
C/C++ header that defines the version components, e.g.::

    constexpr int major = 1;
    constexpr int minor = 2;
    constexpr int patch = 3;
    constexpr const char* build = "4";
    constexpr const char* ref = "abcd";

A header resolves to ``major.minor.patch.build.ref``. Components that are
never found are rendered empty (``1.2..5.``); nothing validates the result.
A literal is used unchanged and also written to a ``version`` marker file in
the application's staged tree so the installed program can report it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from .result import Err, Ok, Result

if TYPE_CHECKING:
    from releaser.output.console import ConsoleProtocol

__all__ = [
    "HEADER_SUFFIX",
    "VERSION_MARKER_FILE",
    "ResolvedVersion",
    "VersionFileError",
    "is_version_header",
    "parse_version_header",
    "read_version_header",
    "resolve_version",
]

HEADER_SUFFIX = ".h"
VERSION_MARKER_FILE = "version"

# Checked in order against the whole line; the first key found wins.
_COMPONENT_KEYS = ("major", "minor", "patch", "build", "ref")
_QUOTED_KEYS = frozenset({"build", "ref"})

VersionSource = Literal["literal", "header", "unreadable"]


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """A resolved version and where it came from.

    ``marker_error`` is set when the ``version`` marker file for a literal
    could not be written.
    """

    value: str
    source: VersionSource
    marker_error: str | None = None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VersionFileError:
    message: str
    path: Path


def is_version_header(raw: str) -> bool:
    return raw.endswith(HEADER_SUFFIX)


def parse_version_header(text: str) -> str:
    """Extract ``major.minor.patch.build.ref`` from header text.

    Only lines containing both ``=`` and ``;`` are considered. The value is
    the text between the first ``=`` and the next ``;``, trimmed of spaces.
    """
    components = dict.fromkeys(_COMPONENT_KEYS, "")
    for line in text.split("\n"):
        if "=" not in line or ";" not in line:
            continue
        token = line.split("=")[1].split(";")[0].strip(" ")
        key = next((k for k in _COMPONENT_KEYS if k in line), None)
        if key is None:
            continue
        if key in _QUOTED_KEYS:
            token = token.replace('"', "")
        components[key] = token
    return ".".join(components[k] for k in _COMPONENT_KEYS)


def read_version_header(path: Path) -> Result[str, VersionFileError]:
    try:
        text = path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        return Err(VersionFileError(f"read version file failed: {e}", path=path))
    return Ok(parse_version_header(text))


def _write_marker(work_path: Path, version: str, console: ConsoleProtocol) -> str | None:
    marker = work_path / VERSION_MARKER_FILE
    try:
        marker.write_text(version, encoding="utf-8")
    except OSError as e:
        console.warning("create version file failed", path=marker, error=e)
        return str(e)
    console.info("create version file", path=marker)
    return None


def resolve_version(
    raw: str, *, work_path: Path, console: ConsoleProtocol, cwd: Path | None = None
) -> ResolvedVersion:
    """Resolve the configured version for one application.

    Unreadable headers are tolerated: the raw configured value is kept and a
    warning is logged.
    """
    if not is_version_header(raw):
        marker_error = _write_marker(work_path, raw, console)
        return ResolvedVersion(value=raw, source="literal", marker_error=marker_error)

    header = Path(raw)
    if not header.is_absolute():
        header = (cwd if cwd is not None else Path.cwd()) / header

    match read_version_header(header):
        case Ok(value):
            console.info("app version", version=value, path=header)
            return ResolvedVersion(value=value, source="header")
        case Err(error):
            console.warning(error.message, path=error.path)
            return ResolvedVersion(value=raw, source="unreadable")
