"""Logging setup for mount-sshfs."""
import logging
import sys
from pathlib import Path
from typing import Optional

from mount_sshfs.shared.errors import ErrorCode

# The mount command goes to stdout, so console logging must stay on stderr.
CONSOLE_FORMAT = '%(message)s'
DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


def setup_logger(
    name: str = "mount_sshfs",
    level: int = logging.INFO,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Set up application logger.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional file path for file handler

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    # handlers filter by level; the file handler records DEBUG regardless
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)
    logger.propagate = False

    # Remove existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_format = DEBUG_FORMAT if level <= logging.DEBUG else CONSOLE_FORMAT
    console_handler.setFormatter(
        logging.Formatter(console_format, datefmt='%Y-%m-%d %H:%M:%S')
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        )
        logger.addHandler(file_handler)

    return logger


def log_check_event(
    logger: logging.Logger,
    step: str,
    passed: bool,
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    error_code: Optional[ErrorCode] = None,
    message: Optional[str] = None
):
    """
    Log one step of the remote verification sequence.

    Failed steps are logged at DEBUG as well: the error itself is reported
    once, by whoever handles it.
    """
    parts = [
        f"step={step}",
        f"status={'pass' if passed else 'fail'}",
    ]

    if host and port:
        parts.append(f"remote={host}:{port}")
    if user:
        # Only show the first 3 chars of the remote user
        sanitized_user = user[:3] + "***" if len(user) > 3 else "***"
        parts.append(f"user={sanitized_user}")
    if error_code:
        parts.append(f"error={error_code.name}")
    if message:
        parts.append(f"msg={message}")

    logger.debug(" | ".join(parts))
