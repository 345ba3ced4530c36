"""
API access for Farm Client

Contains the dual-session HTTP client, session invalidation, authentication
flows, resource wrappers, and background pollers.
"""

from .client import ApiClient
from .invalidation import SessionInvalidationHandler
from .auth import AccessDecision, AuthService
from .resources import FarmApi, Resource
from .polling import NotificationPoller, Poller, WeatherAlertPoller

__all__ = [
    "ApiClient",
    "SessionInvalidationHandler",
    "AccessDecision",
    "AuthService",
    "FarmApi",
    "Resource",
    "NotificationPoller",
    "Poller",
    "WeatherAlertPoller",
]
