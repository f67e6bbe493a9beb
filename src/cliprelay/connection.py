#!/usr/bin/env python3
"""Per-connection actor.

A ConnectionActor owns one established stream (plain TCP or TLS), its parse
buffer and its change guard. It runs two tasks against them:
- a read task that decodes incoming frames and applies them to the clipboard
- a poll task that samples the clipboard and sends local changes

Both tasks live on the same event loop, so the guard is only ever touched
by one of them at a time. When either task ends, or shutdown is requested,
the other is cancelled and the connection is closed. There is no reconnect.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from cliprelay.change_guard import ChangeGuard
from cliprelay.clipboard_io import ClipboardAccessError
from cliprelay.poll_loop import POLL_INTERVAL, run_poll_loop
from cliprelay.protocol import FrameDecoder

if TYPE_CHECKING:
    from cliprelay.clipboard_io import ClipboardAccess

logger = logging.getLogger(__name__)

# Maximum bytes requested from the stream per read.
READ_CHUNK_SIZE: int = 65536


class ConnectionState(enum.Enum):
    CONNECTING = "connecting"
    ESTABLISHED = "established"
    CLOSED = "closed"


class ConnectionActor:
    """Synchronize the local clipboard with one peer over one stream."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        clipboard: ClipboardAccess,
        poll_interval: float = POLL_INTERVAL,
        peer: str = "peer",
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.clipboard = clipboard
        self.poll_interval = poll_interval
        self.peer = peer
        self.state = ConnectionState.CONNECTING
        self.guard = ChangeGuard()
        self.decoder = FrameDecoder()

    async def run(self, shutdown_requested: asyncio.Event | None = None) -> None:
        """Run the read and poll tasks until the connection ends.

        Returns normally when the peer closes the stream or shutdown is
        requested. The connection is always closed on exit.

        Args:
            shutdown_requested: Optional event that stops the connection
                when set.

        Raises:
            ConnectionError: On connection loss.
            OSError: On other socket or TLS errors.
        """
        self.state = ConnectionState.ESTABLISHED
        read_task = asyncio.create_task(self._read_loop())
        poll_task = asyncio.create_task(
            run_poll_loop(self.guard, self.clipboard, self.writer, self.poll_interval)
        )
        tasks = {read_task, poll_task}
        if shutdown_requested is not None:
            tasks.add(asyncio.create_task(shutdown_requested.wait()))

        pending = tasks
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            errors = [e for e in (task.exception() for task in done) if e is not None]
            if errors:
                raise errors[0]
            if shutdown_requested is not None and shutdown_requested.is_set():
                logger.debug("Shutdown requested, closing connection to %s", self.peer)
        finally:
            for task in pending:
                task.cancel()
            for task in pending:
                with suppress(asyncio.CancelledError):
                    await task
            await self.close()

    async def _read_loop(self) -> None:
        """Read from the stream until EOF, applying each complete frame."""
        while True:
            data = await self.reader.read(READ_CHUNK_SIZE)
            if not data:
                logger.debug("%s closed the connection", self.peer)
                return
            await self.handle_bytes(data)

    async def handle_bytes(self, data: bytes) -> None:
        """Feed received bytes to the decoder and apply every complete body.

        Args:
            data: Bytes from one read.
        """
        for body in self.decoder.feed(data):
            await self.apply_remote(body)

    async def apply_remote(self, text: str) -> None:
        """Record a received body in the guard, then write it to the clipboard.

        Clipboard write failures are logged; the connection stays open.

        Args:
            text: Decoded message body.
        """
        logger.debug("Received %d characters from %s", len(text), self.peer)
        self.guard.on_message_received(text)
        try:
            await self.clipboard.write(text)
        except ClipboardAccessError as e:
            logger.warning("Error copying to clipboard: %s", e)
            return
        logger.debug("Body copied to clipboard")

    async def close(self) -> None:
        """Release the parse buffer and guard and close the stream."""
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED
        self.decoder.reset()
        self.guard.clear()
        self.writer.close()
        with suppress(OSError):
            await self.writer.wait_closed()
