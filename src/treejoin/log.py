"""Logging setup for applications embedding treejoin.

The library itself only ever obtains loggers via ``logging.getLogger(__name__)``; it
never installs handlers on import. Call ``configure_logging`` once to see diagnostics.
"""

import logging
import os
from typing import Optional, Union

LOG_LEVEL_ENV = "TREEJOIN_LOG_LEVEL"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach a stream handler to the ``treejoin`` logger and set its level.

    Args:
        level: Level name or number. Defaults to the ``TREEJOIN_LOG_LEVEL`` environment
            variable; unknown names fall back to INFO.

    Returns:
        The configured ``treejoin`` logger
    """
    logger = logging.getLogger("treejoin")

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
