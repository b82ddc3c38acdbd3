"""Logging setup for the reconciler process."""

from __future__ import annotations

import logging

# held at WARNING or above, even with --verbose
NOISY_LOGGERS = ("httpx", "httpcore", "kubernetes.client.rest", "urllib3")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once.

    Worker thread names are part of the format so concurrent reconciles of
    different keys can be told apart. Pass ``force=True`` to reconfigure during
    tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(threadName)s] [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    quiet = max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
