"""Console logging setup."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route ``shipdesk`` and uvicorn loggers to one console handler.

    Safe to call more than once: existing handlers are replaced.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for name in ("shipdesk", "uvicorn"):
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper()))
        logger.handlers = [handler]
        logger.propagate = False

    # Statement echo is controlled by the engine, not the log level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
