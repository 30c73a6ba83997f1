from __future__ import annotations

import logging

LOG_FORMAT = "[Review Helper] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attaches a single stream handler to the ``reviewhelper`` logger."""

    logger = logging.getLogger("reviewhelper")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(getattr(handler, "_review_helper", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._review_helper = True
        logger.addHandler(handler)
    return logger
