#!/usr/bin/env python3
"""Server mode implementation for cliprelay.

The server listens on a TCP port, on all interfaces unless --bind is given,
optionally with TLS.
For every client that connects, the server:
- Polls the local clipboard and sends changes to that client
- Receives clipboard content from that client and writes it locally
- Keeps serving other clients when one disconnects

Connections are independent: each has its own parse buffer and change
guard, and nothing serializes their access to the shared clipboard.

Usage:
    cliprelay --server --port 3000 [--secure --key KEY --cert CERT]
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cliprelay.errors import ConfigError
from cliprelay.server_handler import handle_client
from cliprelay.signals import install_shutdown_handlers
from cliprelay.tls import create_server_context

if TYPE_CHECKING:
    import ssl

    from cliprelay.clipboard_io import ClipboardAccess
    from cliprelay.settings import RelaySettings

logger = logging.getLogger(__name__)


def load_server_tls(settings: RelaySettings) -> ssl.SSLContext | None:
    """Load the TLS context for secure mode, or return None.

    Raises:
        ConfigError: If secure mode lacks key/cert paths or they cannot
            be loaded.
    """
    if not settings.secure:
        return None
    if not settings.key_path or not settings.cert_path:
        raise ConfigError("Secure server mode requires a key and a certificate")
    return create_server_context(settings.cert_path, settings.key_path)


async def start_server(
    settings: RelaySettings,
    clipboard: ClipboardAccess,
    shutdown_requested: asyncio.Event | None = None,
) -> asyncio.Server:
    """Load TLS if needed and start listening.

    Args:
        settings: Port, TLS and poll settings.
        clipboard: The local clipboard shared by all connections.
        shutdown_requested: Event passed to every connection handler.

    Returns:
        The listening asyncio.Server.

    Raises:
        ConfigError: If TLS files cannot be loaded; raised before binding.
        OSError: If the port cannot be bound.
    """
    ssl_context = load_server_tls(settings)
    server = await asyncio.start_server(
        lambda r, w: handle_client(r, w, clipboard, settings.poll_interval, shutdown_requested),
        host=settings.bind_host,
        port=settings.port,
        ssl=ssl_context,
    )
    logger.info("Server running on port %d%s", settings.port, settings.transport_label)
    return server


async def run_server(
    settings: RelaySettings,
    clipboard: ClipboardAccess,
    shutdown_requested: asyncio.Event | None = None,
) -> None:
    """Run the server until shutdown is requested.

    Args:
        settings: Port, TLS and poll settings.
        clipboard: The local clipboard shared by all connections.
        shutdown_requested: Event that stops the server; when omitted,
            SIGINT/SIGTERM handlers are installed to set one.
    """
    if shutdown_requested is None:
        shutdown_requested = asyncio.Event()
        install_shutdown_handlers(shutdown_requested)

    server = await start_server(settings, clipboard, shutdown_requested)
    async with server:
        await shutdown_requested.wait()
        logger.info("Shutting down server")
        server.close()
