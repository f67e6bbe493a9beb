#!/usr/bin/env python3
"""Errors shared across cliprelay modules."""


class ConfigError(Exception):
    """Startup configuration that makes running impossible.

    Raised for unreadable TLS files, a secure server without key/cert paths,
    and platforms without a supported clipboard tool. The CLI reports it and
    exits with status 1.
    """

    pass
