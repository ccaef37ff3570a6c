"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure application logging with a single stream handler.

    ``level`` is usually ``Settings.log_level``; names are case-insensitive so
    ``ON_THE_MAP_LOG_LEVEL=debug`` works. Calling again only updates the level.
    Subsystems log through children of the ``on_the_map`` logger, so their
    levels can be tuned individually with ``logging.getLogger(name)``.
    """
    if isinstance(level, str):
        level = level.strip().upper()
    logger = logging.getLogger("on_the_map")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
