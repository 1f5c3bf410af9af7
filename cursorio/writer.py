"""Positioned writes and typed encoders."""

import logging
from typing import Optional, Union

from cursorio.common import codec, fileutil
from cursorio.common.constants import BIG_ENDIAN, DOUBLE_SIZE, FLOAT_SIZE, INT64_SIZE, LITTLE_ENDIAN
from cursorio.common.errors import IOConsistencyError
from cursorio.handle import FileHandle

logger = logging.getLogger("cursorio.writer")


class FileWriter(FileHandle):
    """Write typed values into a file at a moving pointer.

    ``file_size`` starts from the file's metadata and then grows with the
    writes this handle makes; it never shrinks and is not re-queried from the
    OS after each write. Writing past ``file_size`` leaves a hole whose
    content is whatever the filesystem provides (usually zeros).

    Note that with an append mode (``"a"``, ``"a+"``...) POSIX ``pwrite``
    ignores the position and appends, so the pointer stops matching the data.
    """

    flags_setting = "write_flags"

    file_size = 0

    @property
    def length(self) -> int:
        return self.file_size

    async def refresh_stats(self) -> None:
        fd = self._require_open()
        self.stats = await fileutil.fstat_fd(fd)
        self.file_size = self.stats.st_size
        logger.debug("fd %d: size=%d", fd, self.file_size)

    async def write(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """Write all of *data* at the pointer and advance past it.

        Raises:
            IOConsistencyError: If the OS wrote a different number of bytes.
        """
        fd = self._require_open()
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"data must be bytes-like, not {type(data).__name__}")
        data = bytes(data)
        if not data:
            return

        written = await fileutil.pwrite_at(fd, data, self.pointer)
        if written != len(data):
            # Part of the data may be on disk; pointer and file_size stay put.
            logger.warning("Short write on fd %d at %d: wanted %d, wrote %d", fd, self.pointer, len(data), written)
            raise IOConsistencyError("write", len(data), written)

        self.pointer += written
        if self.pointer > self.file_size:
            self.file_size = self.pointer

    async def write_string(self, string: str, encoding: Optional[str] = None, errors: Optional[str] = None) -> None:
        """Encode *string* to bytes and write it."""
        await self.write(string.encode(encoding or self.settings.encoding, errors or self.settings.string_errors))

    # ── Generic integers ─────────────────────────────────────

    async def _write_int(self, size: int, value: int, byteorder: str, signed: bool, operation: str) -> None:
        codec.check_int_size(size)
        if size == INT64_SIZE:
            self._require_int64(operation)
        await self.write(codec.encode_int(value, size, byteorder, signed))

    async def write_int_be(self, size: int, value: int) -> None:
        await self._write_int(size, value, BIG_ENDIAN, True, "write_int_be")

    async def write_int_le(self, size: int, value: int) -> None:
        await self._write_int(size, value, LITTLE_ENDIAN, True, "write_int_le")

    async def write_uint_be(self, size: int, value: int) -> None:
        await self._write_int(size, value, BIG_ENDIAN, False, "write_uint_be")

    async def write_uint_le(self, size: int, value: int) -> None:
        await self._write_int(size, value, LITTLE_ENDIAN, False, "write_uint_le")

    # ── Fixed-width integers ─────────────────────────────────

    async def write_int8(self, value: int) -> None:
        await self.write_int_be(1, value)

    async def write_uint8(self, value: int) -> None:
        await self.write_uint_be(1, value)

    async def write_int16_be(self, value: int) -> None:
        await self.write_int_be(2, value)

    async def write_int16_le(self, value: int) -> None:
        await self.write_int_le(2, value)

    async def write_uint16_be(self, value: int) -> None:
        await self.write_uint_be(2, value)

    async def write_uint16_le(self, value: int) -> None:
        await self.write_uint_le(2, value)

    async def write_int32_be(self, value: int) -> None:
        await self.write_int_be(4, value)

    async def write_int32_le(self, value: int) -> None:
        await self.write_int_le(4, value)

    async def write_uint32_be(self, value: int) -> None:
        await self.write_uint_be(4, value)

    async def write_uint32_le(self, value: int) -> None:
        await self.write_uint_le(4, value)

    async def write_int64_be(self, value: int) -> None:
        await self._write_int(INT64_SIZE, value, BIG_ENDIAN, True, "write_int64_be")

    async def write_int64_le(self, value: int) -> None:
        await self._write_int(INT64_SIZE, value, LITTLE_ENDIAN, True, "write_int64_le")

    async def write_uint64_be(self, value: int) -> None:
        await self._write_int(INT64_SIZE, value, BIG_ENDIAN, False, "write_uint64_be")

    async def write_uint64_le(self, value: int) -> None:
        await self._write_int(INT64_SIZE, value, LITTLE_ENDIAN, False, "write_uint64_le")

    # ── IEEE-754 ─────────────────────────────────────────────

    async def write_float_be(self, value: float) -> None:
        await self.write(codec.encode_float(value, FLOAT_SIZE, BIG_ENDIAN))

    async def write_float_le(self, value: float) -> None:
        await self.write(codec.encode_float(value, FLOAT_SIZE, LITTLE_ENDIAN))

    async def write_double_be(self, value: float) -> None:
        await self.write(codec.encode_float(value, DOUBLE_SIZE, BIG_ENDIAN))

    async def write_double_le(self, value: float) -> None:
        await self.write(codec.encode_float(value, DOUBLE_SIZE, LITTLE_ENDIAN))
