"""Shared fixtures for cursorio tests."""

from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
import pytest

from cursorio.config import IOSettings, reset_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep the host's config files and CURSORIO_* variables out of tests."""
    for name in ("CONFIG", "READ_FLAGS", "WRITE_FLAGS", "FILE_MODE", "ENCODING", "STRING_ERRORS", "LOG_LEVEL"):
        monkeypatch.delenv(f"CURSORIO_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> IOSettings:
    return IOSettings()


async def write_file(path: Path, data: bytes) -> None:
    async with aiofiles.open(path, "wb") as f:
        await f.write(data)


async def read_file(path: Path) -> bytes:
    async with aiofiles.open(path, "rb") as f:
        return await f.read()  # type: ignore[no-any-return]
