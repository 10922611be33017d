"""Logging configuration helpers for the quiz server."""

from __future__ import annotations

import logging
from logging import Logger

# Participant pages poll the current question and leaderboard every few
# seconds; one access line per poll drowns out quiz events.
_QUIET_LOGGERS = ("uvicorn.access",)


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure process-wide logging and return the ``live_quiz`` logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logger = logging.getLogger("live_quiz")
    logger.setLevel(level)
    return logger
