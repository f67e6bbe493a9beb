#!/usr/bin/env python3
"""Periodic clipboard polling.

This module provides the poll task each connection runs alongside its read
task:
- poll_once: sample the clipboard and send it if the guard allows
- run_poll_loop: call poll_once on a fixed interval until cancelled
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cliprelay.change_guard import Suppress
from cliprelay.clipboard_io import ClipboardAccessError
from cliprelay.protocol import encode_frame, validate_content_size

if TYPE_CHECKING:
    from cliprelay.change_guard import ChangeGuard
    from cliprelay.clipboard_io import ClipboardAccess

logger = logging.getLogger(__name__)

# Seconds between clipboard samples.
POLL_INTERVAL: float = 2.0


async def poll_once(
    guard: ChangeGuard,
    clipboard: ClipboardAccess,
    writer: asyncio.StreamWriter,
) -> bool:
    """Sample the clipboard once and send it to the peer if it changed.

    Clipboard read failures are logged and skip this tick only.

    Args:
        guard: The connection's change guard.
        clipboard: Clipboard to sample.
        writer: The asyncio StreamWriter for the connection.

    Returns:
        True if a frame was written, False otherwise.

    Raises:
        ConnectionError: If writing to the peer fails.
    """
    try:
        raw = await clipboard.read()
    except ClipboardAccessError as e:
        logger.warning("Error reading clipboard: %s", e)
        return False

    decision = guard.on_clipboard_sample(raw.strip())
    if isinstance(decision, Suppress):
        logger.debug("Not sending clipboard: %s", decision.reason)
        return False

    if not validate_content_size(decision.value.encode("utf-8")):
        logger.warning("Clipboard content exceeds 10 MB limit, skipping")
        return False

    frame = encode_frame(decision.value)
    writer.write(frame)
    await writer.drain()
    logger.debug("Sent %d byte frame to remote", len(frame))
    return True


async def run_poll_loop(
    guard: ChangeGuard,
    clipboard: ClipboardAccess,
    writer: asyncio.StreamWriter,
    interval: float = POLL_INTERVAL,
) -> None:
    """Poll the clipboard every interval seconds until cancelled.

    The first sample is taken one interval after start.

    Args:
        guard: The connection's change guard.
        clipboard: Clipboard to sample.
        writer: The asyncio StreamWriter for the connection.
        interval: Seconds between samples.

    Raises:
        ConnectionError: If writing to the peer fails.
    """
    while True:
        await asyncio.sleep(interval)
        await poll_once(guard, clipboard, writer)
