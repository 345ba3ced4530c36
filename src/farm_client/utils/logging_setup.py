"""
Logging setup for Farm Client

Package-wide console and rotating-file logging. Bearer tokens never reach a
handler: every record passes through TokenRedactingFilter first.
"""

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .config import LoggingConfig


PACKAGE_LOGGER = 'farm_client'

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

_SIZE_UNITS = {
    'KB': 1024,
    'MB': 1024 ** 2,
    'GB': 1024 ** 3,
}

_TOKEN_PATTERNS = [
    re.compile(r'(Bearer\s+)[^\s\'",}]+', re.IGNORECASE),
    re.compile(r'(["\']?(?:token|adminToken)["\']?\s*[:=]\s*["\']?)[^\s\'",}]+'),
]


def parse_size(value: str) -> int:
    """Convert a size string such as '10MB' into bytes"""
    text = str(value).strip().upper()
    for unit, factor in _SIZE_UNITS.items():
        if text.endswith(unit):
            return int(float(text[:-len(unit)]) * factor)
    return int(text)


def redact_tokens(text: str) -> str:
    for pattern in _TOKEN_PATTERNS:
        text = pattern.sub(r'\1***', text)
    return text


class TokenRedactingFilter(logging.Filter):
    """Masks bearer and session tokens in the rendered log message"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_tokens(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _build_handlers(settings: 'LoggingConfig') -> List[logging.Handler]:
    level = getattr(logging, settings.level.upper())

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_path,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding='utf-8'
        )
        rotating.setLevel(logging.DEBUG)
        rotating.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(rotating)

    redactor = TokenRedactingFilter()
    for handler in handlers:
        handler.addFilter(redactor)
    return handlers


def setup_logging(settings: 'LoggingConfig') -> logging.Logger:
    """Configure the package logger from a LoggingConfig

    Calling it again replaces the handlers installed by the previous call, so
    a long-lived process can switch level or log file.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, settings.level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(settings):
        logger.addHandler(handler)

    # Transport libraries log full URLs and headers at DEBUG
    for name in ('urllib3', 'requests', 'asyncio'):
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"Logging initialized at {settings.level.upper()}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger with the given name"""
    return logging.getLogger(f'{PACKAGE_LOGGER}.{name}')
