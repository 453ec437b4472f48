"""
Logging Configuration
=====================
One call at start-up wires the 'strandanalysis' package logger. Model modules
only ask for `logging.getLogger(__name__)` and never touch handlers.

The report itself is printed on stdout, so log records go to stderr and,
optionally, to a file.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "strandanalysis"

# Short lines on the console, timestamps in the file
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger and return it.

    Calling it again replaces (and closes) the handlers of the previous call,
    so a second run in the same process does not duplicate every record.

    Args:
        level: Logging level for the logger and all of its handlers.
        log_file: Optional path; the file is overwritten on each run.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
