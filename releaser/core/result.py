"""Result values for explicit success/failure propagation.

Every pipeline step returns ``Ok(value)`` or ``Err(error)`` instead of
raising, so the top-level run decides whether a failure terminates the
process.

Usage:
    match load_config(path, console=console):
        case Ok(config):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value, usually a frozen dataclass describing what
            failed.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
