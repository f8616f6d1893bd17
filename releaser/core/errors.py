"""Process exit codes.

A release either completes or aborts on the first fatal error, so only two
codes are used. They are kept in one enum so the CLI and the error presenter
agree on them.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the release command."""

    OK = 0
    FATAL = 1

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK
