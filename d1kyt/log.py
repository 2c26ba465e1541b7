"""Package logger shared by every d1-kyt module.

Modules derive their own logger with ``logger.getChild(__name__)``.
"""

import logging

logger = logging.getLogger("d1kyt")

_FORMAT = "%(levelname)s: %(message)s"


def setup(level: int = logging.INFO) -> None:
    """Attach a stderr handler to the package logger.

    Calling it again only changes the level.

    Args:
        level: Logging level for the package logger.
    """
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
