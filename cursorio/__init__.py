"""cursorio - cursor-based random-access binary file I/O."""

from cursorio.common.errors import (
    CursorIOError,
    InsufficientDataError,
    InvalidStateError,
    IOConsistencyError,
    NotSupportedError,
)
from cursorio.reader import FileReader
from cursorio.writer import FileWriter

__version__ = "0.1.0"

__all__ = [
    "CursorIOError",
    "FileReader",
    "FileWriter",
    "IOConsistencyError",
    "InsufficientDataError",
    "InvalidStateError",
    "NotSupportedError",
    "__version__",
]
