#!/usr/bin/env python3
"""Pytest fixtures for cliprelay tests.

Provides an in-memory clipboard, a fresh ChangeGuard, and a mock stream
writer.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cliprelay.change_guard import ChangeGuard
from cliprelay.clipboard_io import ClipboardAccessError


class FakeClipboard:
    """In-memory ClipboardAccess that records writes.

    Set fail_reads / fail_writes to make the next operations raise
    ClipboardAccessError.
    """

    def __init__(self, content: str = "") -> None:
        self.content = content
        self.writes: list[str] = []
        self.reads = 0
        self.fail_reads = False
        self.fail_writes = False

    async def read(self) -> str:
        self.reads += 1
        if self.fail_reads:
            raise ClipboardAccessError("clipboard unavailable")
        return self.content

    async def write(self, text: str) -> None:
        if self.fail_writes:
            raise ClipboardAccessError("clipboard locked")
        self.writes.append(text)
        self.content = text


@pytest.fixture
def clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def guard() -> ChangeGuard:
    """Create a fresh ChangeGuard instance for testing."""
    return ChangeGuard()


@pytest.fixture
def mock_writer() -> AsyncMock:
    """Create a mock StreamWriter."""
    writer = AsyncMock()
    writer.write = MagicMock()
    writer.close = MagicMock()
    writer.wait_closed = AsyncMock()
    writer.get_extra_info = MagicMock(return_value=("127.0.0.1", 50000))
    return writer
