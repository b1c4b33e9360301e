"""Logging configuration helpers."""
import logging
import os
from typing import Optional

LOG_LEVEL_ENV_VAR = "CALORIE_CORE_LOG_LEVEL"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the "src" logger with a single stream handler.

    Args:
        level: Level name; defaults to $CALORIE_CORE_LOG_LEVEL or INFO
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    logger = logging.getLogger("src")
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
