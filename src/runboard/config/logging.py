"""Root logger setup for the runboard CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs full request URLs at INFO, including the Firestore ``key`` parameter.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for command line use.

    Transport loggers stay at WARNING unless ``level`` is DEBUG; request traces then
    come from the redacted hook in ``runboard.adapters.http_resilience`` instead.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
