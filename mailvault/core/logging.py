"""
Secure Logging Module
=====================

Logging helpers that keep credential material out of log output.

Security Features:
- Automatic redaction of password/token assignments
- Redaction of long base64 and hex runs (blobs, keys)
- Account masking helper for email addresses
- Optional rotating log file with size limits
"""

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Final, Optional, Pattern

if TYPE_CHECKING:
    from mailvault.core.config import LoggingConfig


# Patterns for sensitive data detection
_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("password", re.compile(r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("token", re.compile(r'(?i)(token|bearer)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("secret", re.compile(r'(?i)(secret|private[_-]?key)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    # Stored blobs are base64; anything this long is treated as one
    ("base64_secret", re.compile(r'[A-Za-z0-9+/]{40,}={0,2}')),
    ("hex_secret", re.compile(r'(?i)(?:0x)?[a-f0-9]{32,}')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def mask_account(user_id: str) -> str:
    """
    Mask an email address for log output.

    ``alice@2925.com`` becomes ``a***@2925.com``; values without a domain
    keep only their first character.
    """
    if not user_id:
        return "***"
    local, sep, domain = user_id.partition("@")
    return f"{local[:1]}***{sep}{domain}"


class SecureLogFilter(logging.Filter):
    """
    Log filter that removes sensitive information from log messages.

    Matches are replaced with ``name=[REDACTED]``. Records are never
    dropped, only sanitized.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _redact(record.msg)

        if isinstance(record.args, dict):
            record.args = {key: _redact_arg(value) for key, value in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(_redact_arg(arg) for arg in record.args)

        return True


def _redact(text: str) -> str:
    for name, pattern in _SENSITIVE_PATTERNS:
        text = pattern.sub(f"{name}={_REDACTED_TEXT}", text)
    return text


def _redact_arg(value: object) -> object:
    return _redact(value) if isinstance(value, str) else value


def get_secure_logger(
    name: str,
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    enable_console: bool = True,
    enable_file: bool = False,
    max_file_size: int = 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Create a logger with automatic secret filtering.

    Args:
        name: Logger name (typically __name__)
        log_dir: Directory for log files (file output needs this)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Whether to output to stderr
        enable_file: Whether to output to a rotating file
        max_file_size: Maximum log file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))
    secure_filter = SecureLogFilter()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT, datefmt="%H:%M:%S"))
        console_handler.addFilter(secure_filter)
        logger.addHandler(console_handler)

    if enable_file and log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_dir / f"{name.replace('.', '_')}.log"),
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        file_handler.addFilter(secure_filter)
        logger.addHandler(file_handler)

    # Without a handler, logging's last-resort handler would print to stderr
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.propagate = False

    return logger


def configure_logging(config: "LoggingConfig", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the ``mailvault`` package logger from a LoggingConfig.

    Library modules log through ``logging.getLogger(__name__)`` and inherit
    the handlers installed here. Call once at application startup.
    """
    return get_secure_logger(
        "mailvault",
        log_dir=log_dir,
        level=config.level,
        enable_console=config.enable_console,
        enable_file=config.enable_file,
        max_file_size=config.max_file_size_bytes,
        backup_count=config.backup_count,
    )
