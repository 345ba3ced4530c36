"""
Error types and authentication-failure classification for Farm Client

Separates server signals that require a fresh login from ordinary request
failures, and carries the details the invalidation handler needs.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import requests


class FarmClientError(Exception):
    """Base class for all Farm Client errors"""


class ValidationError(FarmClientError):
    """Input rejected on the client before any request was sent"""


class ApiError(FarmClientError):
    """API error with status code, message and the untouched response"""

    def __init__(self, status_code: int, message: str,
                 body: Any = None, response: Optional[requests.Response] = None):
        self.status_code = status_code
        self.message = message
        self.body = body
        self.response = response
        super().__init__(f"API Error {status_code}: {message}")


class SessionInvalidatedError(ApiError):
    """The server asked for a fresh login and the local session was cleared"""

    def __init__(self, info: 'InvalidationInfo', body: Any = None,
                 response: Optional[requests.Response] = None):
        self.info = info
        super().__init__(info.status_code, info.message, body=body, response=response)


class InvalidationReason(Enum):
    """Why the server invalidated a session"""
    USER_DELETED = "user_deleted"
    TOKEN_EXPIRED = "token_expired"
    INVALID_TOKEN = "invalid_token"
    ACCOUNT_DEACTIVATED = "account_deactivated"


DEFAULT_MESSAGES = {
    InvalidationReason.USER_DELETED: "Your account has been deleted. Please contact the administrator.",
    InvalidationReason.TOKEN_EXPIRED: "Your session has expired. Please login again.",
    InvalidationReason.INVALID_TOKEN: "Your session is no longer valid. Please login again.",
    InvalidationReason.ACCOUNT_DEACTIVATED: "Your account has been deactivated.",
}


@dataclass
class InvalidationInfo:
    """Information about a server-signaled session invalidation"""
    reason: InvalidationReason
    status_code: int
    message: str
    server_message: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict:
        """Convert to dictionary for logging"""
        return {
            'reason': self.reason.value,
            'status_code': self.status_code,
            'message': self.message,
            'server_message': self.server_message,
            'timestamp': self.timestamp,
        }


class AuthFailureDetector:
    """Detects and classifies authentication-invalidation responses"""

    INVALIDATING_STATUSES = (401, 403)

    @classmethod
    def requires_login(cls, status_code: int, body: Any) -> bool:
        """Check if a response is a requiresLogin signal"""
        if status_code not in cls.INVALIDATING_STATUSES:
            return False
        if not isinstance(body, dict):
            return False
        return body.get('requiresLogin') is True

    @classmethod
    def classify(cls, status_code: int, body: Any) -> Optional[InvalidationInfo]:
        """Classify a failed response; None means it is an ordinary failure"""
        if not cls.requires_login(status_code, body):
            return None

        server_message = body.get('message') or None

        # 403 only ever means deactivated; deleted/expired flags are a 401 concern
        if status_code == 403:
            reason = InvalidationReason.ACCOUNT_DEACTIVATED
            message = server_message or DEFAULT_MESSAGES[reason]
        elif body.get('userDeleted'):
            reason = InvalidationReason.USER_DELETED
            message = DEFAULT_MESSAGES[reason]
        elif body.get('tokenExpired'):
            reason = InvalidationReason.TOKEN_EXPIRED
            message = DEFAULT_MESSAGES[reason]
        else:
            reason = InvalidationReason.INVALID_TOKEN
            message = server_message or DEFAULT_MESSAGES[reason]

        return InvalidationInfo(
            reason=reason,
            status_code=status_code,
            message=message,
            server_message=server_message
        )


def classify_auth_failure(status_code: int, body: Any) -> Optional[InvalidationInfo]:
    """Shortcut for AuthFailureDetector.classify"""
    return AuthFailureDetector.classify(status_code, body)
