import logging
import os
from functools import wraps

_LOGGER_NAME = "rackplan_core"
_SPY_LOGGER = logging.getLogger(f"{_LOGGER_NAME}.spy")


def spy_enabled() -> bool:
    val = os.getenv("RACKPLAN_SPY", "0")
    return str(val).lower() not in {"", "0", "false", "no"}


def spy_trace(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if spy_enabled():
            _SPY_LOGGER.debug("Entering %s", func.__qualname__)
        result = func(*args, **kwargs)
        if spy_enabled():
            _SPY_LOGGER.debug("Exiting %s", func.__qualname__)
        return result
    return wrapper


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """
    Ensure the rackplan_core logger has a handler in case the app didn't configure logging.
    Safe to call multiple times.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
