#!/usr/bin/env python3
"""Client mode implementation for cliprelay.

This module provides the main entry point for client mode, which connects
to a cliprelay server, sends local clipboard changes to it, and applies the
server's clipboard changes locally. The client returns when the server
disconnects; it does not reconnect.

See client_retry.py for connection handling.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cliprelay.client_retry import connect_with_retry
from cliprelay.connection import ConnectionActor
from cliprelay.signals import install_shutdown_handlers
from cliprelay.tls import create_client_context

if TYPE_CHECKING:
    from cliprelay.clipboard_io import ClipboardAccess
    from cliprelay.settings import RelaySettings

logger = logging.getLogger(__name__)


async def run_client(
    settings: RelaySettings,
    clipboard: ClipboardAccess,
    shutdown_requested: asyncio.Event | None = None,
) -> None:
    """Run client mode against one server.

    Args:
        settings: Host, port, TLS and poll settings.
        clipboard: The local clipboard.
        shutdown_requested: Event that closes the connection; when omitted,
            SIGINT/SIGTERM handlers are installed to set one.

    Raises:
        ConnectionError: If the connection cannot be established or is lost
            with an error.
    """
    if shutdown_requested is None:
        shutdown_requested = asyncio.Event()
        install_shutdown_handlers(shutdown_requested)

    ssl_context = create_client_context() if settings.secure else None
    reader, writer = await connect_with_retry(
        settings.host, settings.port, ssl_context, settings.connect_retries
    )
    peer = f"{settings.host}:{settings.port}"
    logger.info("Connected to server at %s%s", peer, settings.transport_label)

    actor = ConnectionActor(
        reader, writer, clipboard, poll_interval=settings.poll_interval, peer=f"Server {peer}"
    )
    try:
        await actor.run(shutdown_requested)
    except OSError as e:
        raise ConnectionError(f"Connection to {peer} lost: {e}") from e
    logger.info("Disconnected from server")
