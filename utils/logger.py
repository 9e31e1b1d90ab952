"""
utils/logger.py
---------------
Logging setup for the bot process.

Every module logs through ``get_logger(__name__)``. The first call installs
a single stdout handler on the root logger at ``LOG_LEVEL``; ``main`` calls
``configure_logging`` explicitly so the level is applied before the
Telegram library starts logging.
"""

import logging
import sys

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that are too chatty at INFO. httpx also puts the bot token in request URLs.
_QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler")

_handler: logging.Handler | None = None


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Attach the stdout handler to the root logger. Later calls only change the level."""
    global _handler
    value = getattr(logging, level.upper(), None)
    root = logging.getLogger()
    root.setLevel(value if isinstance(value, int) else logging.INFO)
    if _handler is not None:
        return

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(_handler)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, setting up logging on first use."""
    if _handler is None:
        configure_logging()
    return logging.getLogger(name)
