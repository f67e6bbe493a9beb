#!/usr/bin/env python3
"""Runtime settings collected from the command line.

RelaySettings groups everything the server and client endpoints need so
that the CLI layer is the only place that knows about option names.
"""

from __future__ import annotations

from dataclasses import dataclass

from cliprelay.poll_loop import POLL_INTERVAL

DEFAULT_PORT: int = 3000
DEFAULT_HOST: str = "localhost"


@dataclass(frozen=True)
class RelaySettings:
    """Settings for one server or client run.

    Attributes:
        server: True for server mode, False for client mode.
        host: Host the client connects to.
        bind_host: Address the server listens on; None for all interfaces.
        port: TCP port to listen on or connect to.
        secure: Wrap the connection in TLS.
        key_path: PEM private key for the TLS server.
        cert_path: PEM certificate for the TLS server.
        poll_interval: Seconds between clipboard samples.
        connect_retries: Extra attempts for the client's initial connect.
    """

    server: bool
    host: str = DEFAULT_HOST
    bind_host: str | None = None
    port: int = DEFAULT_PORT
    secure: bool = False
    key_path: str | None = None
    cert_path: str | None = None
    poll_interval: float = POLL_INTERVAL
    connect_retries: int = 0

    @property
    def transport_label(self) -> str:
        """Suffix for log messages describing the transport."""
        return " with TLS" if self.secure else ""
