"""Error types raised by cursorio.

Failures of the underlying open/close/stat/read/write calls are not wrapped:
they surface as the builtin ``OSError`` exactly as the OS reported them.
"""

from typing import Optional


class CursorIOError(Exception):
    """Base class for errors raised by the cursor engine itself."""


class InsufficientDataError(CursorIOError):
    """A read asked for more bytes than remain between the pointer and EOF."""

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(f"Not enough data to read: requested {requested} bytes, {available} available")


class IOConsistencyError(CursorIOError):
    """A read or write moved a different number of bytes than requested."""

    def __init__(self, operation: str, expected: int, actual: int) -> None:
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(f"{operation}: expected {expected} bytes, got {actual}")


class NotSupportedError(CursorIOError):
    """The runtime lacks the numeric facilities an operation needs."""

    def __init__(self, operation: str, reason: Optional[str] = None) -> None:
        self.operation = operation
        message = f"{operation} not supported"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidStateError(CursorIOError):
    """The handle was never initialized or has already been destroyed."""
