#!/usr/bin/env python3
"""TLS contexts for secure mode.

The server loads its certificate and private key once, before binding, and
refuses to start if either file cannot be read. The client encrypts but does
not verify the peer certificate, so self-signed server certificates work.
"""

from __future__ import annotations

import ssl

from cliprelay.errors import ConfigError


def create_server_context(cert_path: str, key_path: str) -> ssl.SSLContext:
    """Create the server-side TLS context.

    Args:
        cert_path: Path to the PEM certificate (chain).
        key_path: Path to the PEM private key.

    Returns:
        SSLContext with the certificate chain loaded.

    Raises:
        ConfigError: If either file is missing, unreadable or invalid.
    """
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    try:
        context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    except OSError as e:
        raise ConfigError(f"Error reading TLS files: {e}") from e
    return context


def create_client_context() -> ssl.SSLContext:
    """Create a client-side TLS context that accepts self-signed peers."""
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context
