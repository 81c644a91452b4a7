"""Logging setup for command-line runs."""

from __future__ import annotations

import logging

# transport libraries log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Send log records to stderr, keeping stdout free for command output.

    ``verbose`` switches the registry loggers and the HTTP stack to DEBUG.
    Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
