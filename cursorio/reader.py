"""Bounds-checked reads and typed decoders."""

import logging
from typing import Optional

from cursorio.common import codec, fileutil
from cursorio.common.constants import BIG_ENDIAN, DOUBLE_SIZE, FLOAT_SIZE, INT64_SIZE, LITTLE_ENDIAN
from cursorio.common.errors import InsufficientDataError, IOConsistencyError
from cursorio.handle import FileHandle

logger = logging.getLogger("cursorio.reader")


class FileReader(FileHandle):
    """Read typed values from a file at a moving pointer.

    Every read is checked against the file size captured by the last
    :meth:`refresh_stats`; reading past it fails before any I/O is issued.

    Example::

        async with FileReader("data.bin") as reader:
            magic = await reader.read_uint32_be()
            name = await reader.read_string(16)
    """

    flags_setting = "read_flags"

    @property
    def length(self) -> int:
        if self.stats is None:
            return 0
        return self.stats.st_size

    async def refresh_stats(self) -> None:
        fd = self._require_open()
        self.stats = await fileutil.fstat_fd(fd)
        logger.debug("fd %d: size=%d", fd, self.stats.st_size)

    def is_readable(self, size: int) -> bool:
        """Whether *size* bytes remain between the pointer and the end of file."""
        return self.length - self.pointer >= size

    async def read(self, size: int) -> bytes:
        """Read exactly *size* bytes at the pointer and advance past them.

        Args:
            size: Number of bytes to read (0 returns ``b""`` without I/O)

        Returns:
            The bytes read.

        Raises:
            InsufficientDataError: If fewer than *size* bytes remain.
            IOConsistencyError: If the OS returned a short read.
        """
        fd = self._require_open()
        self._check_size(size)
        if size == 0:
            return b""
        if not self.is_readable(size):
            raise InsufficientDataError(size, max(0, self.length - self.pointer))

        data = await fileutil.pread_at(fd, size, self.pointer)
        if len(data) != size:
            logger.warning("Short read on fd %d at %d: wanted %d, got %d", fd, self.pointer, size, len(data))
            raise IOConsistencyError("read", size, len(data))

        self.pointer += size
        return data

    async def read_string(self, size: int, encoding: Optional[str] = None, errors: Optional[str] = None) -> str:
        """Read *size* bytes and decode them as text."""
        data = await self.read(size)
        return data.decode(encoding or self.settings.encoding, errors or self.settings.string_errors)

    # ── Generic integers ─────────────────────────────────────

    async def _read_int(self, size: int, byteorder: str, signed: bool, operation: str) -> int:
        codec.check_int_size(size)
        if size == INT64_SIZE:
            self._require_int64(operation)
        return codec.decode_int(await self.read(size), byteorder, signed)

    async def read_int_be(self, size: int) -> int:
        return await self._read_int(size, BIG_ENDIAN, True, "read_int_be")

    async def read_int_le(self, size: int) -> int:
        return await self._read_int(size, LITTLE_ENDIAN, True, "read_int_le")

    async def read_uint_be(self, size: int) -> int:
        return await self._read_int(size, BIG_ENDIAN, False, "read_uint_be")

    async def read_uint_le(self, size: int) -> int:
        return await self._read_int(size, LITTLE_ENDIAN, False, "read_uint_le")

    # ── Fixed-width integers ─────────────────────────────────

    async def read_int8(self) -> int:
        return await self.read_int_be(1)

    async def read_uint8(self) -> int:
        return await self.read_uint_be(1)

    async def read_int16_be(self) -> int:
        return await self.read_int_be(2)

    async def read_int16_le(self) -> int:
        return await self.read_int_le(2)

    async def read_uint16_be(self) -> int:
        return await self.read_uint_be(2)

    async def read_uint16_le(self) -> int:
        return await self.read_uint_le(2)

    async def read_int32_be(self) -> int:
        return await self.read_int_be(4)

    async def read_int32_le(self) -> int:
        return await self.read_int_le(4)

    async def read_uint32_be(self) -> int:
        return await self.read_uint_be(4)

    async def read_uint32_le(self) -> int:
        return await self.read_uint_le(4)

    async def read_int64_be(self) -> int:
        return await self._read_int(INT64_SIZE, BIG_ENDIAN, True, "read_int64_be")

    async def read_int64_le(self) -> int:
        return await self._read_int(INT64_SIZE, LITTLE_ENDIAN, True, "read_int64_le")

    async def read_uint64_be(self) -> int:
        return await self._read_int(INT64_SIZE, BIG_ENDIAN, False, "read_uint64_be")

    async def read_uint64_le(self) -> int:
        return await self._read_int(INT64_SIZE, LITTLE_ENDIAN, False, "read_uint64_le")

    # ── IEEE-754 ─────────────────────────────────────────────

    async def read_float_be(self) -> float:
        return codec.decode_float(await self.read(FLOAT_SIZE), BIG_ENDIAN)

    async def read_float_le(self) -> float:
        return codec.decode_float(await self.read(FLOAT_SIZE), LITTLE_ENDIAN)

    async def read_double_be(self) -> float:
        return codec.decode_float(await self.read(DOUBLE_SIZE), BIG_ENDIAN)

    async def read_double_le(self) -> float:
        return codec.decode_float(await self.read(DOUBLE_SIZE), LITTLE_ENDIAN)
