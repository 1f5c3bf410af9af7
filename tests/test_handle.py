"""Handle lifecycle: init/destroy, descriptor ownership, pointer moves."""

import os
from pathlib import Path

import pytest
from conftest import write_file

from cursorio.common import fileutil
from cursorio.common.errors import InvalidStateError, NotSupportedError
from cursorio.common.models import BorrowedDescriptor, HandleState, OwnedPath
from cursorio.reader import FileReader
from cursorio.writer import FileWriter


def _is_open(fd: int) -> bool:
    try:
        os.fstat(fd)
    except OSError:
        return False
    return True


# ── construction ──────────────────────────────────────────────


def test_construction_does_no_io(tmp_path: Path):
    reader = FileReader(tmp_path / "missing.bin")
    assert reader.state is HandleState.CREATED
    assert reader.fd is None
    assert reader.pointer == 0
    assert isinstance(reader.target, OwnedPath)


def test_default_flags_come_from_settings(tmp_path: Path, settings):
    assert FileReader(tmp_path / "a", settings=settings).flags == "r"
    assert FileWriter(tmp_path / "a", settings=settings).flags == "w"
    assert FileWriter(tmp_path / "a", "r+", settings=settings).flags == "r+"


def test_bad_flags_fail_at_construction(tmp_path: Path):
    with pytest.raises(ValueError):
        FileReader(tmp_path / "a", "nope")


# ── init / destroy ────────────────────────────────────────────


@pytest.mark.asyncio
async def test_init_missing_file_raises_oserror(tmp_path: Path):
    reader = FileReader(tmp_path / "missing.bin")
    with pytest.raises(FileNotFoundError):
        await reader.init()
    assert reader.state is HandleState.CREATED


@pytest.mark.asyncio
async def test_owned_descriptor_closed_on_destroy(tmp_path: Path):
    path = tmp_path / "owned.bin"
    await write_file(path, b"abc")

    reader = FileReader(path)
    await reader.init()
    fd = reader.fd
    assert fd is not None
    assert reader.state is HandleState.OPEN
    assert reader.owns_descriptor

    await reader.destroy()
    assert reader.fd is None
    assert reader.state is HandleState.CLOSED
    assert not _is_open(fd)


@pytest.mark.asyncio
async def test_borrowed_descriptor_stays_open(tmp_path: Path):
    path = tmp_path / "borrowed.bin"
    await write_file(path, b"abc")
    fd = os.open(path, os.O_RDONLY)
    try:
        reader = FileReader(fd)
        assert isinstance(reader.target, BorrowedDescriptor)
        assert not reader.owns_descriptor
        await reader.init()
        assert reader.fd == fd
        assert reader.length == 3
        await reader.destroy()
        assert _is_open(fd)
        assert os.pread(fd, 3, 0) == b"abc"
    finally:
        os.close(fd)


@pytest.mark.asyncio
async def test_borrowed_descriptor_with_writer(tmp_path: Path):
    path = tmp_path / "borrowed_w.bin"
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        async with FileWriter(fd) as writer:
            await writer.write(b"xyz")
        assert _is_open(fd)
    finally:
        os.close(fd)
    assert path.read_bytes() == b"xyz"


@pytest.mark.asyncio
async def test_operations_after_destroy_fail(tmp_path: Path):
    path = tmp_path / "dead.bin"
    await write_file(path, b"abcd")
    reader = FileReader(path)
    await reader.init()
    await reader.destroy()

    with pytest.raises(InvalidStateError):
        await reader.read(1)
    with pytest.raises(InvalidStateError):
        await reader.refresh_stats()
    with pytest.raises(InvalidStateError):
        reader.offset(1)
    with pytest.raises(InvalidStateError):
        reader.set_pointer(0)
    with pytest.raises(InvalidStateError):
        await reader.init()
    with pytest.raises(InvalidStateError):
        await reader.destroy()


@pytest.mark.asyncio
async def test_operations_before_init_fail(tmp_path: Path):
    writer = FileWriter(tmp_path / "never.bin")
    with pytest.raises(InvalidStateError, match="not initialized"):
        await writer.write(b"x")
    with pytest.raises(InvalidStateError):
        await writer.refresh_stats()
    assert not (tmp_path / "never.bin").exists()


@pytest.mark.asyncio
async def test_double_init_fails(tmp_path: Path):
    path = tmp_path / "twice.bin"
    await write_file(path, b"")
    async with FileReader(path) as reader:
        with pytest.raises(InvalidStateError):
            await reader.init()


@pytest.mark.asyncio
async def test_destroy_without_init(tmp_path: Path):
    reader = FileReader(tmp_path / "unused.bin")
    await reader.destroy()
    assert reader.state is HandleState.CLOSED


@pytest.mark.asyncio
async def test_stat_failure_closes_owned_descriptor(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "stat.bin"
    await write_file(path, b"abc")
    opened: list[int] = []
    real_open = fileutil.open_fd

    async def _open(*args):
        fd = await real_open(*args)
        opened.append(fd)
        return fd

    async def _fstat(fd):
        raise PermissionError("denied")

    monkeypatch.setattr(fileutil, "open_fd", _open)
    monkeypatch.setattr(fileutil, "fstat_fd", _fstat)

    reader = FileReader(path)
    with pytest.raises(PermissionError):
        await reader.init()
    assert reader.state is HandleState.CLOSED
    assert reader.fd is None
    assert not _is_open(opened[0])


@pytest.mark.asyncio
async def test_context_manager_destroys(tmp_path: Path):
    path = tmp_path / "ctx.bin"
    await write_file(path, b"ab")
    async with FileReader(path) as reader:
        assert await reader.read(2) == b"ab"
        fd = reader.fd
    assert reader.state is HandleState.CLOSED
    assert fd is not None and not _is_open(fd)


@pytest.mark.asyncio
async def test_context_manager_tolerates_manual_destroy(tmp_path: Path):
    path = tmp_path / "ctx2.bin"
    await write_file(path, b"")
    async with FileReader(path) as reader:
        await reader.destroy()
    assert reader.state is HandleState.CLOSED


# ── pointer ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_offset_and_set_pointer_chain(tmp_path: Path):
    path = tmp_path / "ptr.bin"
    await write_file(path, bytes(range(10)))
    async with FileReader(path) as reader:
        assert reader.offset(3) is reader
        assert reader.pointer == 3
        assert await reader.read(1) == b"\x03"
        reader.offset(-2)
        assert await reader.read(1) == b"\x02"
        assert reader.set_pointer(9).pointer == 9
        assert await reader.read(1) == b"\x09"


def test_pointer_moves_need_no_init(tmp_path: Path):
    reader = FileReader(tmp_path / "x.bin")
    reader.offset(5).offset(2)
    assert reader.pointer == 7


def test_pointer_beyond_eof_is_allowed(tmp_path: Path):
    reader = FileReader(tmp_path / "x.bin")
    assert reader.set_pointer(1 << 40).pointer == 1 << 40


def test_negative_pointer_rejected(tmp_path: Path):
    reader = FileReader(tmp_path / "x.bin")
    reader.set_pointer(2)
    with pytest.raises(ValueError):
        reader.offset(-3)
    assert reader.pointer == 2
    with pytest.raises(ValueError):
        reader.set_pointer(-1)
    with pytest.raises(TypeError):
        reader.set_pointer(1.5)  # type: ignore[arg-type]


# ── 64-bit capability ─────────────────────────────────────────


def test_int64_capability_is_inspectable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from cursorio.common import codec

    reader = FileReader(tmp_path / "x.bin")
    assert reader.int64_supported
    monkeypatch.setattr(codec, "supports_int64", lambda: False)
    assert not reader.int64_supported
    with pytest.raises(NotSupportedError, match="read_int64_be"):
        reader._require_int64("read_int64_be")


def test_repr(tmp_path: Path):
    assert "state=created" in repr(FileWriter(tmp_path / "r.bin"))
