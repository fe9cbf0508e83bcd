"""Logging helpers for alert_historian
"""
import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# HTTP client loggers that would otherwise log every metrics write at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for a process embedding the historian.

    ``level`` wins over ``HISTORIAN_LOG_LEVEL``, which wins over ``LOG_LEVEL``.
    """
    level_name = (
        level
        or os.environ.get("HISTORIAN_LOG_LEVEL")
        or os.environ.get("LOG_LEVEL", "INFO")
    ).upper()

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
