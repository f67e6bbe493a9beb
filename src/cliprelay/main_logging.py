"""Logging configuration for the cliprelay CLI."""
import logging


def configure_logging(verbose: bool, quiet: bool = False) -> None:
    """Configure logging level based on verbosity settings.

    Args:
        verbose: If True, set DEBUG level (per-frame traffic).
        quiet: If True and not verbose, set WARNING level; otherwise INFO
            (connection lifecycle).

    Errors are always printed to stderr regardless of verbosity.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
