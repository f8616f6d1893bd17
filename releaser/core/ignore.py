"""Exclusion patterns for staging.

``ignore.txt`` holds one pattern per line. A file is left out of the staged
tree when its slash-normalized path either ends with a pattern literally
(``.pdb``, ``config/local.json``) or matches it as a glob. Globs use
single-segment semantics: ``*`` and ``?`` never cross ``/`` and there is no
``**``. A glob only has to match the trailing segments of the path, so
``*.log`` excludes log files at any depth.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .config import to_slash
from .result import Err, Ok, Result

__all__ = [
    "DEFAULT_IGNORE_FILE",
    "IgnoreFileError",
    "IgnoreList",
    "glob_matches",
    "load_ignore_list",
    "parse_ignore_text",
]

DEFAULT_IGNORE_FILE = "ignore.txt"


@dataclass(frozen=True, slots=True)
class IgnoreFileError:
    message: str
    path: Path


def _translate_class(pattern: str, start: int) -> tuple[str, int] | None:
    """Translate ``[...]`` beginning at ``start``; None if unterminated."""
    i = start + 1
    negate = i < len(pattern) and pattern[i] in "!^"
    if negate:
        i += 1
    parts: list[str] = []
    while i < len(pattern) and pattern[i] != "]":
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            i += 1
            ch = pattern[i]
        if i + 2 < len(pattern) and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            hi = pattern[i + 2]
            if hi == "\\" and i + 3 < len(pattern):
                hi = pattern[i + 3]
                i += 1
            parts.append(f"{re.escape(ch)}-{re.escape(hi)}")
            i += 3
            continue
        parts.append(re.escape(ch))
        i += 1
    if i >= len(pattern) or not parts:
        return None
    body = "".join(parts)
    return (f"[^/{body}]" if negate else f"[{body}]"), i + 1


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str] | None:
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "*":
            out.append("[^/]*")
            i += 1
        elif ch == "?":
            out.append("[^/]")
            i += 1
        elif ch == "[":
            translated = _translate_class(pattern, i)
            if translated is None:
                return None
            cls, i = translated
            out.append(cls)
        elif ch == "\\":
            if i + 1 >= len(pattern):
                return None
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(ch))
            i += 1
    # Anchor at the end of the path and at a segment boundary at the start.
    try:
        return re.compile(r"(?:^|(?<=/))" + "".join(out) + r"\Z", re.DOTALL)
    except re.error:
        # e.g. a reversed range such as [z-a]
        return None


def glob_matches(pattern: str, path: str) -> bool:
    """Match ``pattern`` against the trailing segments of ``path``.

    Malformed patterns (unterminated ``[``, reversed range, trailing ``\\``)
    never match as globs.
    """
    compiled = _compile(pattern)
    if compiled is None:
        return False
    return compiled.search(path) is not None


@dataclass(frozen=True, slots=True)
class IgnoreList:
    """Loaded exclusion patterns; read-only for the whole run."""

    patterns: tuple[str, ...] = ()

    def should_ignore(self, path: str | Path) -> bool:
        normalized = to_slash(str(path))
        for pattern in self.patterns:
            if normalized.endswith(pattern):
                return True
            if glob_matches(pattern, normalized):
                return True
        return False

    def __len__(self) -> int:
        return len(self.patterns)


def parse_ignore_text(text: str) -> IgnoreList:
    """Split pattern text into lines, trim them and drop blanks."""
    patterns = [line.strip() for line in text.split("\n")]
    return IgnoreList(patterns=tuple(p for p in patterns if p))


def load_ignore_list(path: Path) -> Result[IgnoreList, IgnoreFileError]:
    """Load the ignore file. An empty file is valid; a missing one is not."""
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return Err(IgnoreFileError(f"Ignore file not found: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(IgnoreFileError(f"Error reading ignore file: {e}", path=path))
    return Ok(parse_ignore_text(text))
