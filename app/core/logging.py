"""
Logging setup.

All loggers live under the "internhub" namespace, e.g.
logging.getLogger("internhub.store").
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root "internhub" logger once per process."""
    logger = logging.getLogger("internhub")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
