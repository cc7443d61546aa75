# album_sync/logging_setup.py
from __future__ import annotations
import logging, sys
from logging.handlers import RotatingFileHandler

def setup_logging(verbosity: int = 1, log_file: str | None = "album-sync.log") -> None:
    try:
        v = int(verbosity)
    except (TypeError, ValueError):
        v = 1
    level = logging.INFO if v <= 1 else logging.DEBUG

    fmt = "%(asctime)s [%(levelname)s] %(message)s"
    datefmt = "%H:%M:%S"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    # force=True drops handlers from a previous call
    logging.basicConfig(level=level, format=fmt, datefmt=datefmt, handlers=handlers, force=True)
    # paramiko is chatty at INFO
    logging.getLogger("paramiko").setLevel(logging.WARNING if v <= 2 else logging.DEBUG)
