"""CLI handling for cliprelay.

This module provides the command-line interface for cliprelay, handling
argument parsing via click, logging configuration, and dispatching to server or client mode based on
user-specified options.

Usage:
    cliprelay --server [--port PORT] [--secure --key KEY --cert CERT] [--verbose]
    cliprelay --client [--host HOST] [--port PORT] [--secure] [--verbose]
"""

import click
import sys

from cliprelay.main_options import MutuallyExclusiveOption, check_tls_options
from cliprelay.main_logging import configure_logging
from cliprelay.poll_loop import POLL_INTERVAL
from cliprelay.settings import DEFAULT_HOST, DEFAULT_PORT, RelaySettings



@click.command(context_settings={"help_option_names": ["--help"]})
@click.option(
    "--server",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    conflicts_with=["client"],
    help="Run in server mode",
)
@click.option(
    "--client",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    conflicts_with=["server"],
    help="Run in client mode",
)
@click.option(
    "--port",
    "-p",
    type=click.IntRange(1, 65535),
    default=DEFAULT_PORT,
    show_default=True,
    help="TCP port to listen on or connect to",
)
@click.option(
    "--host",
    "-h",
    default=DEFAULT_HOST,
    show_default=True,
    help="Server host (client mode)",
)
@click.option(
    "--bind",
    "bind_host",
    default=None,
    help="Address to listen on (server mode, default all interfaces)",
)
@click.option("--secure", is_flag=True, help="Encrypt the connection with TLS")
@click.option(
    "--key",
    type=click.Path(dir_okay=False),
    help="PEM private key (secure server mode)",
)
@click.option(
    "--cert",
    type=click.Path(dir_okay=False),
    help="PEM certificate (secure server mode)",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0.05),
    default=POLL_INTERVAL,
    show_default=True,
    help="Seconds between clipboard checks",
)
@click.option(
    "--connect-retries",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Extra attempts for the initial connection (client mode)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
@click.option(
    "--quiet",
    is_flag=True,
    help="Only log warnings and errors",
)
def main(
    server: bool,
    client: bool,
    port: int,
    host: str,
    bind_host: str | None,
    secure: bool,
    key: str | None,
    cert: str | None,
    interval: float,
    connect_retries: int,
    verbose: bool,
    quiet: bool,
) -> None:
    """Relay clipboard text between two machines over TCP or TLS."""
    if not server and not client:
        raise click.UsageError("Either --server or --client must be specified")
    check_tls_options(server, secure, key, cert)

    configure_logging(verbose, quiet)

    settings = RelaySettings(
        server=server,
        host=host,
        bind_host=bind_host,
        port=port,
        secure=secure,
        key_path=key,
        cert_path=cert,
        poll_interval=interval,
        connect_retries=connect_retries,
    )
    _run_mode(settings)


def _run_mode(settings: RelaySettings) -> None:
    """Run the appropriate mode (server or client).

    Configuration and connection failures are printed and exit with code 1.

    Args:
        settings: Settings built from the command line.
    """
    import asyncio
    from cliprelay.client import run_client
    from cliprelay.clipboard_io import CommandClipboard
    from cliprelay.server import run_server
    from cliprelay.errors import ConfigError

    try:
        clipboard = CommandClipboard.for_platform()
        if settings.server:
            asyncio.run(run_server(settings, clipboard))
        else:
            asyncio.run(run_client(settings, clipboard))
    except (ConfigError, OSError) as e:
        # OSError covers lost connections and a port that cannot be bound
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
