"""
Unit tests for session data models
"""

import pytest

from farm_client.core.session import (
    ADMIN_KEYS,
    FARMER_KEYS,
    AdminRole,
    AdminSession,
    FarmerSession,
    SessionKind,
)


class TestFarmerSession:
    """Test cases for FarmerSession"""

    def test_session_creation(self):
        """Test session creation with all fields"""
        session = FarmerSession(token="abc", farmer_id="7", farmer_name="Asha")

        assert session.token == "abc"
        assert session.farmer_id == "7"
        assert session.farmer_name == "Asha"
        assert session.kind == SessionKind.FARMER

    def test_session_creation_empty_token(self):
        """Test that an empty token raises ValueError"""
        with pytest.raises(ValueError, match="token cannot be empty"):
            FarmerSession(token="")

    def test_to_dict_uses_storage_keys(self):
        session = FarmerSession(token="abc", farmer_id="7", farmer_name="Asha")

        result = session.to_dict()

        assert tuple(result.keys()) == FARMER_KEYS
        assert result == {"token": "abc", "farmerId": "7", "farmerName": "Asha"}

    def test_from_storage(self):
        """Test building a session from stored values"""
        session = FarmerSession.from_storage({"token": "abc", "farmerId": "7", "farmerName": None})

        assert session.token == "abc"
        assert session.farmer_id == "7"
        assert session.farmer_name is None

        # No token means no session, whatever else is stored
        assert FarmerSession.from_storage({"token": None, "farmerId": "7"}) is None
        assert FarmerSession.from_storage({"token": ""}) is None


class TestAdminSession:
    """Test cases for AdminSession"""

    def test_session_creation(self):
        session = AdminSession(token="t", admin_id="1", role=AdminRole.MANAGER,
                               username="mgr", name="Manager")

        assert session.kind == SessionKind.ADMIN
        assert session.has_role(AdminRole.MANAGER)
        assert not session.has_role(AdminRole.SUPER_ADMIN)

    def test_role_string_is_parsed(self):
        session = AdminSession(token="t", role="ADMIN")
        assert session.role == AdminRole.ADMIN

    def test_unknown_role_becomes_none(self):
        """Test that an unknown role never raises"""
        assert AdminRole.parse("OWNER") is None
        assert AdminRole.parse(None) is None
        assert AdminRole.parse("") is None
        assert AdminSession(token="t", role="OWNER").role is None

    def test_empty_token(self):
        with pytest.raises(ValueError, match="token cannot be empty"):
            AdminSession(token=None)

    def test_round_trip_through_storage_keys(self):
        session = AdminSession(token="t", admin_id="1", role=AdminRole.SUPER_ADMIN,
                               username="root", name="Root")

        stored = session.to_dict()

        assert tuple(stored.keys()) == ADMIN_KEYS
        assert stored["adminRole"] == "SUPER_ADMIN"
        assert AdminSession.from_storage(stored) == session

    def test_to_dict_without_role(self):
        assert AdminSession(token="t").to_dict()["adminRole"] is None


if __name__ == "__main__":
    pytest.main([__file__])
