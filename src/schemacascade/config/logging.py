"""Logging configuration for schemacascade.

Everything logs under the ``schemacascade`` namespace. Chatty client
libraries used by the content backend are held at WARNING unless the
package itself runs at DEBUG.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from .settings import get_settings

PACKAGE_LOGGER = "schemacascade"

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)

# Third-party loggers that flood INFO with per-request lines
NOISY_LOGGERS = ("openai", "httpx", "httpcore", "google", "faker")


def parse_level(level: str) -> int:
    """
    Convert a level name such as ``"info"`` to its numeric value.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(
            f"Unknown log level '{level}'. "
            "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return value


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> None:
    """
    Configure the package logger.

    Args:
        level: Logging level name (defaults to the LOG_LEVEL setting)
        log_file: Optional file path for file logging (defaults to LOG_FILE)
        format_string: Optional custom format string

    Raises:
        ValueError: If the level name is unknown
    """
    settings = get_settings()
    numeric_level = parse_level(level or settings.log_level)
    log_file_path = log_file or settings.log_file
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.propagate = False

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the package namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance; names outside the package are nested under it
    """
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        setup_logging()

    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
