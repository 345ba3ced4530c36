"""
Session data models for Farm Client

Defines the farmer and admin session records held in client-side storage.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..utils.logging_setup import get_logger

logger = get_logger('session')


class SessionKind(Enum):
    """Which credential a request or invalidation applies to"""
    FARMER = "farmer"
    ADMIN = "admin"
    NONE = "none"


class AdminRole(Enum):
    """Administrator roles issued by the backend"""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['AdminRole']:
        """Parse a stored role string, returning None for unknown values"""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Ignoring unknown admin role {value!r}")
            return None


FARMER_KEYS = ("token", "farmerId", "farmerName")
ADMIN_KEYS = ("adminToken", "adminId", "adminRole", "adminUsername", "adminName")


@dataclass
class FarmerSession:
    """Represents a logged-in farmer"""

    token: str
    farmer_id: Optional[str] = None
    farmer_name: Optional[str] = None

    kind = SessionKind.FARMER
    keys = FARMER_KEYS

    def __post_init__(self):
        if not self.token:
            raise ValueError("Farmer session token cannot be empty")

    @classmethod
    def from_storage(cls, values: Dict[str, Optional[str]]) -> Optional['FarmerSession']:
        """Build a session from storage values; None when no token is stored"""
        if not values.get("token"):
            return None
        return cls(
            token=values["token"],
            farmer_id=values.get("farmerId"),
            farmer_name=values.get("farmerName")
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert session to its storage-key representation"""
        return {
            "token": self.token,
            "farmerId": self.farmer_id,
            "farmerName": self.farmer_name,
        }


@dataclass
class AdminSession:
    """Represents a logged-in administrator"""

    token: str
    admin_id: Optional[str] = None
    role: Optional[AdminRole] = None
    username: Optional[str] = None
    name: Optional[str] = None

    kind = SessionKind.ADMIN
    keys = ADMIN_KEYS

    def __post_init__(self):
        if not self.token:
            raise ValueError("Admin session token cannot be empty")
        if isinstance(self.role, str):
            self.role = AdminRole.parse(self.role)

    @classmethod
    def from_storage(cls, values: Dict[str, Optional[str]]) -> Optional['AdminSession']:
        """Build a session from storage values; None when no token is stored"""
        if not values.get("adminToken"):
            return None
        return cls(
            token=values["adminToken"],
            admin_id=values.get("adminId"),
            role=AdminRole.parse(values.get("adminRole")),
            username=values.get("adminUsername"),
            name=values.get("adminName")
        )

    def has_role(self, role: AdminRole) -> bool:
        return self.role == role

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert session to its storage-key representation"""
        return {
            "adminToken": self.token,
            "adminId": self.admin_id,
            "adminRole": self.role.value if self.role else None,
            "adminUsername": self.username,
            "adminName": self.name,
        }
