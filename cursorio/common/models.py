"""Models describing what a handle operates on."""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class HandleState(str, Enum):
    """Lifecycle state of a file handle."""

    CREATED = "created"  # constructed, no I/O yet
    OPEN = "open"  # descriptor acquired
    CLOSED = "closed"  # destroyed, unusable


class OwnedPath(BaseModel):
    """A path the handle opens itself and therefore closes on teardown."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Filesystem path to open")

    def __str__(self) -> str:
        return str(self.path)


class BorrowedDescriptor(BaseModel):
    """An already-open descriptor owned by the caller; never closed by the handle."""

    model_config = ConfigDict(frozen=True)

    fd: int = Field(..., ge=0, description="OS-level file descriptor")

    def __str__(self) -> str:
        return f"fd:{self.fd}"


Target = Union[OwnedPath, BorrowedDescriptor]


def to_target(file: Any) -> Target:
    """Classify a constructor argument as an owned path or a borrowed descriptor.

    Args:
        file: A path (``str`` or ``os.PathLike``), an open descriptor (``int``),
            or an existing target.

    Returns:
        The matching target model.
    """
    if isinstance(file, (OwnedPath, BorrowedDescriptor)):
        return file
    # bool is an int subclass but never a descriptor
    if isinstance(file, bool):
        raise TypeError("file must be a path or a file descriptor, not bool")
    if isinstance(file, int):
        if file < 0:
            raise ValueError(f"Invalid file descriptor: {file}")
        return BorrowedDescriptor(fd=file)
    if isinstance(file, (str, os.PathLike)):
        return OwnedPath(path=Path(file))
    raise TypeError(f"file must be a path or a file descriptor, not {type(file).__name__}")
