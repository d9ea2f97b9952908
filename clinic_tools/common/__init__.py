"""
================================================================================
Clinic Tools Common Utilities
================================================================================

Logging setup and small filesystem helpers used by the test framework.

Exports:
    - init_logger: Initialize the loguru logger with standard settings
    - ensure_directory: Create a directory if it does not exist
    - safe_filename: Turn a pytest node id into a filesystem-safe name

Usage:
    from clinic_tools.common import init_logger

    init_logger(level="INFO", log_file="test-results/run.log")

================================================================================
"""

import hashlib
import os
import re
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Safe to call more than once; only the first call configures sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format_string: Log format string. Uses DEFAULT_FORMAT if not provided.
        log_file: Optional file path to write logs to.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="test-results/e2e.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    logger.remove()

    format_string = format_string or DEFAULT_FORMAT
    level = level.upper()

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # enqueue keeps the sink safe when xdist workers share a file
        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation="10 MB",
            retention="7 days",
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {level}")


def reset_logger() -> None:
    """Allow init_logger() to configure sinks again."""
    global _logger_initialized
    _logger_initialized = False


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path as a Path (for chaining)
    """
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def safe_filename(name: str, max_length: int = 120) -> str:
    """
    Convert an arbitrary label (e.g. a pytest node id) to a safe file name.

    Names longer than `max_length` are cut and end with a short hash of the
    full label, so long ids sharing a prefix stay distinct.

    >>> safe_filename("tests/test_owner.py::TestOwner::test_create[chromium]")
    'tests_test_owner.py_TestOwner_test_create_chromium'
    """
    cleaned = _UNSAFE_CHARS.sub("_", name).strip("_")
    if len(cleaned) > max_length:
        digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
        cleaned = f"{cleaned[:max_length - len(digest) - 1]}-{digest}"
    return cleaned or "unnamed"


__all__ = [
    "init_logger",
    "reset_logger",
    "ensure_directory",
    "safe_filename",
]
