"""Logging configuration for openapi-examples.

The library logs under the ``openapi_examples`` logger hierarchy and never
installs handlers on import; applications (and the CLI) call
``configure_logging`` when they want output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

# Default log level
DEFAULT_LEVEL = logging.WARNING

# Log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "openapi_examples"


def configure_logging(
    level: Union[int, str] = DEFAULT_LEVEL,
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """Configure logging for openapi-examples.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL), as an int
            or a level name
        log_file: Optional path to log file. If None, only console logging is enabled.
        console: Whether to log to console (default: True)

    Example:
        # Show every example written into the document
        configure_logging(level=logging.DEBUG)

        # Console + file logging
        configure_logging(
            level="INFO",
            log_file=Path("openapi-examples.log")
        )
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = DEFAULT_LEVEL

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger (avoid duplicate logs)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Name of the module (e.g., "openapi_examples.examples.filters")

    Returns:
        Logger instance

    Example:
        logger = get_logger(__name__)
        logger.debug("Set example for %s", media_type)
    """
    return logging.getLogger(name)


# Library default: stay quiet unless the host application opts in
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())
