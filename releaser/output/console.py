"""Console output capability.

Components never print or log through a module-level singleton. They
receive a ``ConsoleProtocol`` and emit messages with optional structured
fields:

    console.info("copy files", src=app.build_path, dst=app.work_path)

``RichConsole`` renders a timestamped line with ``key=value`` fields.
``MockConsole`` records everything so tests can assert on what was logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
    "format_fields",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


def format_fields(fields: dict[str, object]) -> str:
    """Render fields as ``key=value`` pairs in insertion order."""
    return " ".join(f"{key}={value}" for key, value in fields.items())


class ConsoleProtocol(Protocol):
    """Interface for release progress output.

    ``fields`` carry the structured context of a message (paths, versions,
    return codes) and are rendered after the message text.
    """

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def info(self, message: str, **fields: object) -> None: ...

    def success(self, message: str, **fields: object) -> None: ...

    def warning(self, message: str, **fields: object) -> None: ...

    def error(self, message: str, **fields: object) -> None: ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Timestamped console output using Rich."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console(log_path=False, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.HEADER: "blue bold",
        }

    def _log(self, level: str, level_style: str, message: str, fields: dict[str, object]) -> None:
        from rich.markup import escape

        line = f"[{level_style}]{level}[/{level_style}] {escape(message)}"
        if fields:
            line += f" [dim]{escape(format_fields(fields))}[/dim]"
        self._console.log(line)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def info(self, message: str, **fields: object) -> None:
        self._log("INF", "cyan", message, fields)

    def success(self, message: str, **fields: object) -> None:
        self._log("OK ", "green", message, fields)

    def warning(self, message: str, **fields: object) -> None:
        self._log("WRN", "yellow", message, fields)

    def error(self, message: str, **fields: object) -> None:
        self._log("ERR", "red bold", message, fields)

    def header(self, message: str) -> None:
        from rich.markup import escape

        self._console.print(f"[blue bold]{escape(message)}[/blue bold]")

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    """A single captured output line."""

    message: str
    style: Style
    fields: dict[str, object] = field(default_factory=dict)

    def __str__(self) -> str:
        if not self.fields:
            return self.message
        return f"{self.message} {format_fields(self.fields)}"


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that captures output for tests."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def info(self, message: str, **fields: object) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO, dict(fields)))

    def success(self, message: str, **fields: object) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS, dict(fields)))

    def warning(self, message: str, **fields: object) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING, dict(fields)))

    def error(self, message: str, **fields: object) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR, dict(fields)))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [str(o) for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs whose rendered text contains a substring."""
        return [o for o in self.outputs if substring in str(o)]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
