"""Logging setup for the prbot command line."""

import logging

from rich.logging import RichHandler


def configure_logging(verbose: bool = False) -> None:
    """Configure app-wide logging. Call once at startup."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )

    # Reduce noise from third-party libs
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
