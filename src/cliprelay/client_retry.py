#!/usr/bin/env python3
"""Client connection establishment for cliprelay.

This module opens the client's TCP or TLS stream. The initial connect can
be retried with tenacity exponential backoff; once a connection has been
established and lost, the client does not reconnect.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

if TYPE_CHECKING:
    import ssl

logger = logging.getLogger(__name__)

# Backoff between initial connection attempts, in seconds:
# min(MAX_WAIT, max(INITIAL_WAIT, WAIT_MULTIPLIER * 2 ** attempt)).
INITIAL_WAIT: float = 1.0
MAX_WAIT: float = 60.0
WAIT_MULTIPLIER: float = 2.0


async def connect_to_server(
    host: str,
    port: int,
    ssl_context: ssl.SSLContext | None = None,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to a cliprelay server.

    Args:
        host: Server host name or address.
        port: Server TCP port.
        ssl_context: TLS context for secure mode, or None for plain TCP.

    Returns:
        Tuple of (StreamReader, StreamWriter) for the connection.

    Raises:
        ConnectionError: If connection fails (refused, unreachable, TLS
            handshake failure, etc).
    """
    logger.debug("Connecting to %s:%d", host, port)
    try:
        if ssl_context is None:
            return await asyncio.open_connection(host, port)
        return await asyncio.open_connection(
            host, port, ssl=ssl_context, server_hostname=host
        )
    except OSError as e:
        raise ConnectionError(f"Failed to connect to {host}:{port}: {e}") from e


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a failed attempt before tenacity sleeps."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Connection attempt %d failed: %s, will retry", retry_state.attempt_number, exc)


async def connect_with_retry(
    host: str,
    port: int,
    ssl_context: ssl.SSLContext | None = None,
    retries: int = 0,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to the server, retrying failed attempts with backoff.

    Args:
        host: Server host name or address.
        port: Server TCP port.
        ssl_context: TLS context for secure mode, or None for plain TCP.
        retries: Extra attempts after the first one fails.

    Returns:
        Tuple of (StreamReader, StreamWriter) for the connection.

    Raises:
        ConnectionError: If every attempt fails.
    """
    retrying = AsyncRetrying(
        wait=wait_exponential(
            multiplier=WAIT_MULTIPLIER,
            min=INITIAL_WAIT,
            max=MAX_WAIT,
        ),
        retry=retry_if_exception_type(ConnectionError),
        stop=stop_after_attempt(retries + 1),
        before_sleep=_log_retry,
        reraise=True,
    )
    return await retrying(connect_to_server, host, port, ssl_context)
