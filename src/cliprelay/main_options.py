"""Click option helpers for mode and TLS option rules."""
import click


class MutuallyExclusiveOption(click.Option):
    """Click flag that may not be combined with the flags in conflicts_with."""

    def __init__(self, *args, **kwargs):
        self.conflicts_with = kwargs.pop("conflicts_with", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Raise UsageError if this flag and a conflicting one were both given."""
        if opts.get(self.name):
            for other in self.conflicts_with:
                if opts.get(other):
                    raise click.UsageError(
                        f"Options --{self.name} and --{other} are mutually exclusive"
                    )
        return super().handle_parse_result(ctx, opts, args)


def check_tls_options(server: bool, secure: bool, key: str | None, cert: str | None) -> None:
    """Require --key and --cert for a secure server.

    Args:
        server: True in server mode.
        secure: True when --secure was given.
        key: Value of --key.
        cert: Value of --cert.

    Raises:
        click.UsageError: If a secure server is missing either path.
    """
    if server and secure and (not key or not cert):
        raise click.UsageError("--secure requires --key <path> and --cert <path> for server mode")
