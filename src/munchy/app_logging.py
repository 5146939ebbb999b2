"""Logging setup for the API process."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

# Loggers of HTTP libraries that log every outbound request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the ``munchy`` logger and return it.

    ``level`` may be a number or a name such as ``"DEBUG"``. Calling this
    again only changes the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger = logging.getLogger("munchy")
    logger.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
