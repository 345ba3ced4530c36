"""
Authentication flows and access guards for Farm Client

Logs farmers and admins in and out, and answers the "may this user open
that area" questions the front-end asks before rendering a page.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..core.session import AdminRole, AdminSession, FarmerSession, SessionKind
from ..utils.error_handler import FarmClientError, ValidationError
from ..utils.logging_setup import get_logger
from .client import ApiClient, decode_json

logger = get_logger('auth')

MIN_PHONE_LENGTH = 10


@dataclass
class AccessDecision:
    """Outcome of an access check"""
    allowed: bool
    redirect_to: Optional[str] = None
    reason: Optional[str] = None


def _require(value: Optional[str], message: str):
    if not value or not str(value).strip():
        raise ValidationError(message)


def _require_token(data):
    if not isinstance(data, dict) or not data.get("token"):
        raise FarmClientError("Login response did not include a token")


def _optional_str(value) -> Optional[str]:
    return None if value is None else str(value)


class AuthService:
    """Login, registration, logout and guards on top of an ApiClient"""

    def __init__(self, client: ApiClient):
        self.client = client
        self.store = client.store

    def farmer_login(self, phone: str, password: str) -> FarmerSession:
        """Log a farmer in and persist the farmer session"""
        _require(phone, "Phone number is required")
        _require(password, "Password is required")
        if len(phone.strip()) < MIN_PHONE_LENGTH:
            raise ValidationError(f"Phone number must be at least {MIN_PHONE_LENGTH} digits")

        data = decode_json(self.client.post("/auth/login", json={"phone": phone, "password": password}))
        _require_token(data)

        session = FarmerSession(
            token=data.get("token"),
            farmer_id=_optional_str(data.get("farmerId")),
            farmer_name=_optional_str(data.get("name"))
        )
        self.store.set_farmer(session)
        logger.info(f"Farmer {session.farmer_id} logged in")
        return session

    def register_farmer(self, name: str, phone: str, password: str,
                        address: Optional[str] = None) -> dict:
        """Register a new farmer account; does not log in"""
        _require(name, "Name is required")
        _require(phone, "Phone number is required")
        _require(password, "Password is required")

        payload = {"name": name, "phone": phone, "password": password, "address": address or ""}
        data = decode_json(self.client.post("/auth/register", json=payload))
        logger.info("Farmer registration accepted")
        return data

    def admin_login(self, username: str, password: str) -> AdminSession:
        """Log an administrator in and persist the admin session"""
        _require(username, "Username is required")
        _require(password, "Password is required")

        data = decode_json(self.client.post("/admin/login", json={"username": username, "password": password}))
        _require_token(data)

        session = AdminSession(
            token=data.get("token"),
            admin_id=_optional_str(data.get("adminId")),
            role=AdminRole.parse(data.get("role")),
            username=_optional_str(data.get("username", username)),
            name=_optional_str(data.get("full_name"))
        )
        self.store.set_admin(session)
        logger.info(f"Admin {session.username} logged in")
        return session

    def logout_farmer(self) -> bool:
        return self.store.clear(SessionKind.FARMER)

    def logout_admin(self) -> bool:
        return self.store.clear(SessionKind.ADMIN)

    def current_user(self) -> Optional[Union[FarmerSession, AdminSession]]:
        """The farmer session if present, otherwise the admin session"""
        farmer, admin = self.store.snapshot()
        return farmer or admin

    def can_access_farmer_area(self) -> bool:
        """Farmer pages accept either a farmer or an admin token"""
        return (self.store.has_token(SessionKind.FARMER)
                or self.store.has_token(SessionKind.ADMIN))

    def check_admin_access(self, required_role: Optional[AdminRole] = None) -> AccessDecision:
        """Decide whether the stored admin may open an admin page"""
        admin = self.store.get_admin()
        if admin is None:
            return AccessDecision(False, redirect_to="/", reason="Admin login required")

        if required_role is not None and admin.role != required_role:
            actual = admin.role.value if admin.role else "none"
            return AccessDecision(
                False,
                reason=f"Required role: {required_role.value}; your role: {actual}"
            )

        return AccessDecision(True)
