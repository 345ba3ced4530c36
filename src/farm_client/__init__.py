"""
Farm Client - Dual-Session Access Layer for the Farm Management API

Client-side sessions, credential selection and session invalidation for
farmers and administrators talking to the farm-management REST backend.
"""

__version__ = "1.0.0"

from .core.session import AdminRole, AdminSession, FarmerSession, SessionKind
from .core.session_store import JsonFileStorage, MemoryStorage, SessionStore
from .api.client import ApiClient
from .api.auth import AuthService
from .api.resources import FarmApi

__all__ = [
    "AdminRole",
    "AdminSession",
    "FarmerSession",
    "SessionKind",
    "JsonFileStorage",
    "MemoryStorage",
    "SessionStore",
    "ApiClient",
    "AuthService",
    "FarmApi",
]
