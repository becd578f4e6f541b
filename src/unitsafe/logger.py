"""Logging configuration for unitsafe.

The library logs registration, freezing and merging of unit systems at DEBUG
level, and a WARNING when a basic unit is added after types were already
registered. Errors are raised, never logged.

By default only console logging is enabled at WARNING level, so importing the
library is silent. File logging can be switched on for a detailed trace:

    from unitsafe.logger import enable_file_logging, disable_file_logging

    enable_file_logging("units_debug.log")
    # ... build and use unit systems ...
    disable_file_logging()
"""
import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.WARNING)

logger: logging.Logger = logging.getLogger('unitsafe')
logger.addHandler(console_handler)
logger.setLevel(logging.WARNING)

# File handler (optional, added dynamically)
file_handler: Optional[logging.FileHandler] = None


def enable_file_logging(filename: str = "unitsafe.log") -> None:
    """Log everything down to DEBUG into `filename`.

    Replaces any file handler installed by an earlier call. The file is opened
    in append mode.
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
    logger.addHandler(file_handler)
    logger.setLevel(logging.DEBUG)


def disable_file_logging() -> None:
    """Remove and close the file handler. Safe to call when none is installed."""
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
        logger.setLevel(logging.WARNING)
