"""Open-file session shared by readers and writers."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar, Union

from cursorio.common import codec, fileutil
from cursorio.common.errors import InvalidStateError, NotSupportedError
from cursorio.common.models import BorrowedDescriptor, HandleState, OwnedPath, Target, to_target
from cursorio.config import IOSettings, get_settings

logger = logging.getLogger("cursorio.handle")

H = TypeVar("H", bound="FileHandle")


class FileHandle(ABC):
    """One open binary file plus a byte cursor.

    The handle either opens a path itself (:class:`OwnedPath`) or adopts a
    descriptor the caller already opened (:class:`BorrowedDescriptor`). Only
    owned descriptors are closed by :meth:`destroy`.

    Construction performs no I/O; call :meth:`init` (or use ``async with``)
    before reading or writing. A handle must not run two operations at once:
    ``pointer`` is updated around each syscall without synchronization.
    """

    # IOSettings field holding the default open mode
    flags_setting: str

    def __init__(
        self,
        file: Union[str, "os.PathLike[str]", int, Target],
        flags: Optional[Union[str, int]] = None,
        mode: Optional[int] = None,
        settings: Optional[IOSettings] = None,
    ) -> None:
        """Create a handle.

        Args:
            file: Path to open, or an already-open descriptor to adopt
            flags: Open mode (Node-style string or ``os.O_*`` bits); the
                reader or writer default from settings when None
            mode: Permission bits used if the file is created
            settings: Defaults source (process-wide settings when None)
        """
        self.settings = settings if settings is not None else get_settings()
        self.target: Target = to_target(file)
        self.flags: Union[str, int] = getattr(self.settings, self.flags_setting) if flags is None else flags
        self.mode = self.settings.file_mode if mode is None else mode
        self.fd: Optional[int] = None
        self.stats: Optional[os.stat_result] = None
        self.pointer = 0
        self.state = HandleState.CREATED
        # Validate early so a bad mode fails at construction, not at init()
        fileutil.parse_flags(self.flags)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.target} state={self.state.value} pointer={self.pointer}>"

    async def __aenter__(self: H) -> H:
        await self.init()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self.state is not HandleState.CLOSED:
            await self.destroy()

    @property
    def owns_descriptor(self) -> bool:
        """True when the descriptor was (or will be) opened by this handle."""
        return isinstance(self.target, OwnedPath)

    @property
    def int64_supported(self) -> bool:
        """Whether 64-bit integers can be handled without losing precision."""
        return codec.supports_int64()

    @property
    @abstractmethod
    def length(self) -> int:
        """Size of the file as far as this handle is concerned."""

    @abstractmethod
    async def refresh_stats(self) -> None:
        """Reload file metadata from the descriptor."""

    async def init(self) -> None:
        """Acquire the descriptor and load file metadata.

        Raises:
            InvalidStateError: If the handle was already initialized or destroyed.
            OSError: If opening or stat-ing the file fails.
        """
        if self.state is not HandleState.CREATED:
            raise InvalidStateError(f"Cannot init a handle in state {self.state.value!r}")

        if isinstance(self.target, BorrowedDescriptor):
            fd = self.target.fd
            logger.debug("Adopted descriptor %d", fd)
        else:
            fd = await fileutil.open_fd(self.target.path, fileutil.parse_flags(self.flags), self.mode)
            logger.debug("Opened %s (flags=%r) as fd %d", self.target.path, self.flags, fd)

        self.fd = fd
        self.state = HandleState.OPEN
        try:
            await self.refresh_stats()
        except BaseException:
            if self.owns_descriptor:
                await fileutil.close_fd(fd)
            self.fd = None
            self.state = HandleState.CLOSED
            raise

    async def destroy(self) -> None:
        """Release the descriptor if this handle opened it.

        A borrowed descriptor stays open. The handle is unusable afterwards.
        """
        if self.state is HandleState.CLOSED:
            raise InvalidStateError("Handle already destroyed")

        fd = self.fd
        self.fd = None
        self.state = HandleState.CLOSED
        if fd is None:
            return
        if self.owns_descriptor:
            await fileutil.close_fd(fd)
            logger.debug("Closed fd %d (%s)", fd, self.target)
        else:
            logger.debug("Released borrowed descriptor %d without closing", fd)

    def offset(self: H, size: int) -> H:
        """Move the pointer by *size* bytes (may be negative). No I/O."""
        return self.set_pointer(self.pointer + size)

    def set_pointer(self: H, pointer: int) -> H:
        """Move the pointer to an absolute position. No I/O, no bounds check."""
        if self.state is HandleState.CLOSED:
            raise InvalidStateError("Handle already destroyed")
        if isinstance(pointer, bool) or not isinstance(pointer, int):
            raise TypeError(f"pointer must be an int, not {type(pointer).__name__}")
        if pointer < 0:
            raise ValueError(f"pointer cannot be negative: {pointer}")
        self.pointer = pointer
        return self

    def _require_open(self) -> int:
        if self.state is not HandleState.OPEN or self.fd is None:
            if self.state is HandleState.CLOSED:
                raise InvalidStateError("Handle already destroyed")
            raise InvalidStateError("Handle not initialized; call init() first")
        return self.fd

    def _require_int64(self, operation: str) -> None:
        if not self.int64_supported:
            raise NotSupportedError(operation, "runtime lacks exact 64-bit integer packing")

    @staticmethod
    def _check_size(size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int):
            raise TypeError(f"size must be an int, not {type(size).__name__}")
        if size < 0:
            raise ValueError(f"size cannot be negative: {size}")
