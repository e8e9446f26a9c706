"""
Logging setup for the Lambda entry point and the local CLI
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach one stream handler to the `geocalc` logger.

    Safe to call on every warm invocation; the handler is only added once.
    """
    logger = logging.getLogger("geocalc")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        # Lambda already puts a handler on the root logger
        logger.propagate = False
    return logger
