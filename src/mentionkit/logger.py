"""Logging configuration for mentionkit using loguru.

The file sink and level default to ``MENTIONKIT_LOG_FILE`` and
``MENTIONKIT_LOG_LEVEL``. Setting ``MENTIONKIT_LOG_FILE`` to ``off`` keeps
the library silent, which is what embedding applications usually want.
"""

import os
import sys
from typing import Optional

from loguru import logger

from mentionkit.utils import get_project_root

LOG_FILE_ENV = "MENTIONKIT_LOG_FILE"
LOG_LEVEL_ENV = "MENTIONKIT_LOG_LEVEL"
DEFAULT_LOG_FILE = "mentionkit.log"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

_log_file_path: Optional[str] = None


def _resolve_log_file(log_file: Optional[str]) -> Optional[str]:
    global _log_file_path

    if log_file is None:
        log_file = _log_file_path or os.getenv(LOG_FILE_ENV, DEFAULT_LOG_FILE)
    if log_file.lower() in {"", "off", "none"}:
        return None
    if not os.path.isabs(log_file):
        log_file = os.path.join(get_project_root(), log_file)
    _log_file_path = log_file
    return log_file


def setup_logger(
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
    rotation: str = "5 MB",
    retention: str = "3 days",
    console_output: bool = False,
) -> None:
    """
    Replace all loguru sinks with the mentionkit ones.

    Args:
        log_file: Log file path, relative paths land in the project root.
            ``"off"`` disables the file sink. Defaults to the previous path or
            ``MENTIONKIT_LOG_FILE``.
        log_level: Minimum level; defaults to ``MENTIONKIT_LOG_LEVEL`` or INFO
        rotation: Size at which the log file is rotated
        retention: How long rotated files are kept
        console_output: Also log to stderr
    """
    level = (log_level or os.getenv(LOG_LEVEL_ENV, "INFO")).upper()
    path = _resolve_log_file(log_file)

    logger.remove()

    if console_output:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if path is not None:
        logger.add(
            path,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )


def get_logger(name: Optional[str] = None):
    """Logger bound to a component name shown in every record."""
    return logger.bind(name=name or "mentionkit")


logger.configure(extra={"name": "mentionkit"})

setup_logger()
