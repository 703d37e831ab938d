"""
utils/logger.py
Simple logging wrapper for hostsweep
"""

import logging
import sys


def get_logger(name: str, level: int = logging.WARNING) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (usually module name)
        level: Logging level (default: WARNING)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers; children ("hostsweep.icmp") propagate to the root
    if logger.handlers or "." in name:
        return logger

    logger.setLevel(level)

    # stdout carries scan results, diagnostics go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)

    # Format: [LEVEL] message
    formatter = logging.Formatter(
        '%(levelname)s - %(name)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def set_level(level: int | str) -> None:
    """Apply one level to the project root logger and its children."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    get_logger("hostsweep").setLevel(level)


# Default logger instance
log = get_logger("hostsweep")


__all__ = ["get_logger", "set_level", "log"]
