"""Shared I/O thread pool for cursorio.

Reader and writer handles issue ``os.pread`` / ``os.pwrite`` / ``os.fstat``
which are blocking syscalls.  Running them in a shared ``ThreadPoolExecutor``
keeps the event loop free without creating a pool per handle.
"""

from concurrent.futures import ThreadPoolExecutor

from cursorio.common.constants import DEFAULT_IO_WORKERS

io_pool = ThreadPoolExecutor(max_workers=DEFAULT_IO_WORKERS, thread_name_prefix="cio-io")
