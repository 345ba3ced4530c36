"""
Shared fixtures for unit tests
"""

import json
from unittest.mock import Mock

import pytest
import requests

from farm_client.api.client import ApiClient
from farm_client.core.session import AdminRole, AdminSession, FarmerSession
from farm_client.core.session_store import MemoryStorage, SessionStore


REASONS = {200: "OK", 201: "Created", 400: "Bad Request", 401: "Unauthorized",
           403: "Forbidden", 404: "Not Found", 500: "Internal Server Error"}


def build_response(status_code=200, body=None, text=None):
    """Build a real requests.Response without touching the network"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = REASONS.get(status_code, "")
    response.encoding = "utf-8"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return SessionStore(storage)


@pytest.fixture
def farmer_session():
    return FarmerSession(token="farmer-token", farmer_id="7", farmer_name="Asha")


@pytest.fixture
def admin_session():
    return AdminSession(
        token="admin-token",
        admin_id="1",
        role=AdminRole.SUPER_ADMIN,
        username="root",
        name="Site Admin"
    )


@pytest.fixture
def http():
    session = Mock(spec=requests.Session)
    session.request.return_value = build_response(200, {"ok": True})
    return session


@pytest.fixture
def alerts():
    return []


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def client(store, http, alerts, redirects):
    return ApiClient(
        store=store,
        base_url="http://localhost:5000/api",
        http_session=http,
        alert=alerts.append,
        redirect=redirects.append
    )
