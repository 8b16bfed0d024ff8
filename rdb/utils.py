import logging
import sys

from rdb.core import config

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing to stderr at the configured level."""
    root = logging.getLogger("rdb")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(config.LOG_LEVEL.upper())
    if not name.startswith("rdb"):
        name = f"rdb.{name}"
    return logging.getLogger(name)
