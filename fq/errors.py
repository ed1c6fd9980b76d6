"""
Error hierarchy for fq.

Module: fq/errors.py

Every error is terminal: nothing is retried or recovered. Errors keep the
lower-level cause they wrap so the CLI can render the whole chain as
``message (Caused by: cause)``.
"""

from typing import Optional


class FqError(Exception):
    """Base exception for fq errors."""

    phase: str = "run"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        """
        Initialize fq error.

        Args:
            message: Human-readable error message
            cause: Lower-level exception this error wraps, if any
        """
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} (Caused by: {self.cause})"


class GlobError(FqError):
    """Raised when the glob pattern syntax is invalid."""

    phase = "collect"


class StatError(FqError):
    """Raised when file metadata cannot be read."""

    phase = "collect"


class TimestampError(FqError):
    """Raised when extended timestamps of a file cannot be read."""

    phase = "collect"


class EncodeError(FqError):
    """Raised when records cannot be serialized to JSON."""

    phase = "encode"


class SpawnError(FqError):
    """Raised when the external command cannot be started."""

    phase = "spawn"


class PipeError(FqError):
    """Raised on I/O failure writing to or closing the output stream."""

    phase = "pipe"


class SubprocessError(FqError):
    """Raised when the external command exits non-zero or cannot be waited on."""

    phase = "exit"

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        returncode: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.returncode = returncode


class CollectionError(FqError):
    """Wraps a collector failure at the CLI boundary."""

    phase = "collect"


class UsageError(FqError):
    """Raised when the command line is missing required arguments."""
