"""
Credential resolution for Farm Client

Pure functions that decide which session a request or an invalidation
applies to. Nothing here touches storage.
"""

from dataclasses import dataclass
from typing import Optional

from .session import AdminSession, FarmerSession, SessionKind

ADMIN_PATH_PREFIX = "/admin"


@dataclass(frozen=True)
class Credential:
    """The bearer token chosen for one request"""
    kind: SessionKind
    token: Optional[str] = None

    @property
    def authorization(self) -> Optional[str]:
        """Authorization header value, or None for an unauthenticated request"""
        return f"Bearer {self.token}" if self.token else None


NO_CREDENTIAL = Credential(SessionKind.NONE)


def normalize_path(path: str) -> str:
    """Ensure an API path starts with a single slash"""
    return "/" + path.lstrip("/")


def is_admin_path(path: str) -> bool:
    """Literal prefix test, so '/admins' counts as admin-scoped too"""
    return normalize_path(path).startswith(ADMIN_PATH_PREFIX)


def resolve_credential(
    path: str,
    farmer: Optional[FarmerSession],
    admin: Optional[AdminSession]
) -> Credential:
    """
    Choose the bearer token for a request path.

    Admin-prefixed paths only ever use the admin token. Every other path
    prefers the farmer token and falls back to the admin token, since an
    authenticated admin also calls some shared endpoints.
    """
    if is_admin_path(path):
        if admin is not None:
            return Credential(SessionKind.ADMIN, admin.token)
        return NO_CREDENTIAL

    if farmer is not None:
        return Credential(SessionKind.FARMER, farmer.token)
    if admin is not None:
        return Credential(SessionKind.ADMIN, admin.token)
    return NO_CREDENTIAL


def resolve_invalidated_kind(farmer_present: bool, admin_present: bool) -> SessionKind:
    """
    Pick the session to clear after an invalidation signal.

    The farmer session is checked first even if the failing request used the
    admin token.
    """
    # TODO: pass the Credential of the failing request so an admin-scoped
    # failure cannot clear a coexisting farmer session.
    if farmer_present:
        return SessionKind.FARMER
    if admin_present:
        return SessionKind.ADMIN
    return SessionKind.NONE
