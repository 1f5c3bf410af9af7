"""Cross-platform file I/O utilities.

Provides ``pread`` and ``pwrite`` that work on all platforms including Windows
where ``os.pread`` / ``os.pwrite`` are not available, open-flag parsing, and
awaitable wrappers that run each blocking syscall on the shared I/O pool.
"""

import os
import sys
from typing import Union

from aiofiles.os import wrap  # type: ignore[import-untyped]

from cursorio.io_pool import io_pool

if sys.platform == "win32":

    def pread(fd: int, length: int, offset: int) -> bytes:
        """Positional read, emulated on Windows via seek + read."""
        os.lseek(fd, offset, os.SEEK_SET)
        return os.read(fd, length)

    def pwrite(fd: int, data: bytes, offset: int) -> int:
        """Positional write, emulated on Windows via seek + write."""
        os.lseek(fd, offset, os.SEEK_SET)
        return os.write(fd, data)

else:
    pread = os.pread
    pwrite = os.pwrite


_O_BINARY = getattr(os, "O_BINARY", 0)
_O_SYNC = getattr(os, "O_SYNC", 0)

# Node-style open modes
_FLAG_TABLE = {
    "r": os.O_RDONLY,
    "rs": os.O_RDONLY | _O_SYNC,
    "sr": os.O_RDONLY | _O_SYNC,
    "r+": os.O_RDWR,
    "rs+": os.O_RDWR | _O_SYNC,
    "sr+": os.O_RDWR | _O_SYNC,
    "w": os.O_TRUNC | os.O_CREAT | os.O_WRONLY,
    "wx": os.O_TRUNC | os.O_CREAT | os.O_WRONLY | os.O_EXCL,
    "xw": os.O_TRUNC | os.O_CREAT | os.O_WRONLY | os.O_EXCL,
    "w+": os.O_TRUNC | os.O_CREAT | os.O_RDWR,
    "wx+": os.O_TRUNC | os.O_CREAT | os.O_RDWR | os.O_EXCL,
    "xw+": os.O_TRUNC | os.O_CREAT | os.O_RDWR | os.O_EXCL,
    "a": os.O_APPEND | os.O_CREAT | os.O_WRONLY,
    "ax": os.O_APPEND | os.O_CREAT | os.O_WRONLY | os.O_EXCL,
    "xa": os.O_APPEND | os.O_CREAT | os.O_WRONLY | os.O_EXCL,
    "as": os.O_APPEND | os.O_CREAT | os.O_WRONLY | _O_SYNC,
    "sa": os.O_APPEND | os.O_CREAT | os.O_WRONLY | _O_SYNC,
    "a+": os.O_APPEND | os.O_CREAT | os.O_RDWR,
    "ax+": os.O_APPEND | os.O_CREAT | os.O_RDWR | os.O_EXCL,
    "xa+": os.O_APPEND | os.O_CREAT | os.O_RDWR | os.O_EXCL,
    "as+": os.O_APPEND | os.O_CREAT | os.O_RDWR | _O_SYNC,
    "sa+": os.O_APPEND | os.O_CREAT | os.O_RDWR | _O_SYNC,
}


def parse_flags(flags: Union[str, int]) -> int:
    """Translate an open mode into ``os.open`` flag bits.

    Args:
        flags: A Node-style mode string (``"r"``, ``"w+"``, ``"ax"``...) or
            raw ``os.O_*`` bits, which are passed through.

    Returns:
        Flag bits for ``os.open``, with ``O_BINARY`` added where the platform has it.
    """
    if isinstance(flags, bool):
        raise TypeError("flags must be a mode string or os.O_* bits")
    if isinstance(flags, int):
        return flags | _O_BINARY
    try:
        return _FLAG_TABLE[flags] | _O_BINARY
    except KeyError:
        raise ValueError(f"Unknown file open flags: {flags!r}") from None


# Awaitable syscalls, all executed on the shared I/O pool

_open = wrap(os.open)
_close = wrap(os.close)
_fstat = wrap(os.fstat)
_pread = wrap(pread)
_pwrite = wrap(pwrite)


async def open_fd(path: Union[str, os.PathLike], flags: int, mode: int) -> int:
    """Open *path* and return the new descriptor."""
    return await _open(os.fspath(path), flags, mode, executor=io_pool)  # type: ignore[no-any-return]


async def close_fd(fd: int) -> None:
    """Close *fd*."""
    await _close(fd, executor=io_pool)


async def fstat_fd(fd: int) -> os.stat_result:
    """Fetch metadata for an open descriptor."""
    return await _fstat(fd, executor=io_pool)  # type: ignore[no-any-return]


async def pread_at(fd: int, length: int, offset: int) -> bytes:
    """Read up to *length* bytes at *offset*; the result may be short."""
    return await _pread(fd, length, offset, executor=io_pool)  # type: ignore[no-any-return]


async def pwrite_at(fd: int, data: bytes, offset: int) -> int:
    """Write *data* at *offset* and return the number of bytes written."""
    return await _pwrite(fd, data, offset, executor=io_pool)  # type: ignore[no-any-return]
