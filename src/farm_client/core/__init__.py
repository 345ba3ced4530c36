"""
Core components for Farm Client

Contains session data models, the session store, and credential resolution.
"""

from .session import AdminRole, AdminSession, FarmerSession, SessionKind
from .session_store import JsonFileStorage, KeyValueStorage, MemoryStorage, SessionStore
from .credentials import Credential, resolve_credential, resolve_invalidated_kind

__all__ = [
    "AdminRole",
    "AdminSession",
    "FarmerSession",
    "SessionKind",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "SessionStore",
    "Credential",
    "resolve_credential",
    "resolve_invalidated_kind",
]
