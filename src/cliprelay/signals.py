#!/usr/bin/env python3
"""Signal handling for clean shutdown."""

from __future__ import annotations

import asyncio
import logging
import signal

logger = logging.getLogger(__name__)


def install_shutdown_handlers(shutdown_requested: asyncio.Event) -> None:
    """Set shutdown_requested on SIGINT or SIGTERM.

    Must be called from inside the running event loop. Platforms without
    loop signal handlers (Windows) fall back to KeyboardInterrupt.

    Args:
        shutdown_requested: Event to set when a signal arrives.
    """
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_requested.set)
        except NotImplementedError:
            logger.debug("Signal handlers not supported on this platform")
            return
