"""
Utility modules for Farm Client

Contains configuration management, logging setup, and error types.
"""

from .config import Config
from .logging_setup import setup_logging, get_logger
from .error_handler import (
    ApiError,
    FarmClientError,
    InvalidationInfo,
    InvalidationReason,
    SessionInvalidatedError,
    ValidationError,
    classify_auth_failure,
)

__all__ = [
    "Config",
    "setup_logging",
    "get_logger",
    "ApiError",
    "FarmClientError",
    "InvalidationInfo",
    "InvalidationReason",
    "SessionInvalidatedError",
    "ValidationError",
    "classify_auth_failure",
]
