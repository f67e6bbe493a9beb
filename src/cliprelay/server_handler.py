#!/usr/bin/env python3
"""Server client connection handler.

This module provides the handler for client connections to the server.
Each accepted connection gets its own ConnectionActor, and with it its own
parse buffer and change guard. A failing connection is logged and closed
without affecting the server or other connections.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import asyncio

    from cliprelay.clipboard_io import ClipboardAccess


def format_peer(writer: asyncio.StreamWriter) -> str:
    """Return "host:port" for the remote end of a stream, or "client"."""
    peername = writer.get_extra_info("peername")
    if not peername:
        return "client"
    return f"{peername[0]}:{peername[1]}"


async def handle_client(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    clipboard: ClipboardAccess,
    poll_interval: float,
    shutdown_requested: asyncio.Event | None = None,
) -> None:
    """Handle a single client connection.

    Runs a ConnectionActor for bidirectional clipboard synchronization with
    the connected client until it disconnects, fails, or the server shuts
    down.

    Args:
        reader: The asyncio StreamReader for the socket connection.
        writer: The asyncio StreamWriter for the socket connection.
        clipboard: The local clipboard, shared by all connections.
        poll_interval: Seconds between clipboard samples.
        shutdown_requested: Event signaling graceful server shutdown.
    """
    import logging

    from cliprelay.connection import ConnectionActor

    logger = logging.getLogger(__name__)
    peer = format_peer(writer)
    logger.info("Client connected from %s", peer)

    actor = ConnectionActor(reader, writer, clipboard, poll_interval=poll_interval, peer=peer)
    try:
        await actor.run(shutdown_requested)
        logger.info("Client %s disconnected", peer)
    except OSError as e:
        logger.error("Connection error from %s: %s", peer, e)
