"""
Logging configuration for synth_options.

The library itself only creates child loggers of ``synth_options`` and never
installs handlers on import; applications (and the CLI) call
``setup_logging`` once at startup.
"""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "synth_options"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def setup_logging(
    log_level: str = "INFO",
    log_file: str | None = None,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Configure the ``synth_options`` logger.

    Parameters
    ----------
    log_level : str
        Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : str | None
        Optional path of a log file. If None, logs only go to stderr.
    log_format : str | None
        Optional custom format string

    Returns
    -------
    logging.Logger
        The configured package logger

    Examples
    --------
    >>> logger = setup_logging(log_level="DEBUG")
    >>> logger.debug("Scanning %d breakeven points", 200)
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear existing handlers so repeated calls do not duplicate output
    logger.handlers.clear()

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return the package logger or one of its children.

    ``get_logger(__name__)`` inside the package returns the logger for that
    module without doubling the ``synth_options`` prefix.
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
