"""
Logging configuration for the event-stream code generator.

Usage in modules:
    from eventstream_codegen.logging_config import get_logger
    logger = get_logger(__name__)

All loggers live under the "eventstream_codegen" hierarchy. Levels are
controlled by the CLI (--verbose / --quiet).
"""

import logging
import sys
from typing import Optional

_LOGGER_NAME = "eventstream_codegen"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a child logger under the eventstream_codegen hierarchy.

    Args:
        name: Module __name__, or None for the root logger.

    Returns:
        logging.Logger instance
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the eventstream_codegen logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG
        (default)       -> INFO
        --quiet / -q    -> WARNING

    Args:
        verbose: Enable DEBUG-level output.
        quiet: Suppress INFO output (WARNING+ only).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Avoid duplicate handlers when called multiple times
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_CodegenFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False


class _CodegenFormatter(logging.Formatter):
    """Compact formatter: level prefix for warnings and errors only."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            return f"[{record.levelname.lower()}] {message}"
        if record.levelno <= logging.DEBUG:
            return f"  {record.name.rsplit('.', 1)[-1]}: {message}"
        return message
