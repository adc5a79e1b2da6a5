"""
Pytest fixtures for the storefront API tests.

Every API test runs twice, once per storage backend: the in-memory maps and
SQLAlchemy on an in-memory SQLite database.
"""
import os
import tempfile

# Keep importing storefront.main free of side effects on the working tree
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="storefront-uploads-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 256

BILLING = {
    "firstName": "Asha",
    "lastName": "Verma",
    "email": "asha@mail.com",
    "address": "12 MG Road",
    "city": "Pune",
    "state": "MH",
    "zip": "411001",
}

SESSION = "browser-session-1"


def build_settings(tmp_path, backend="memory", **overrides) -> Settings:
    values = {
        "STORAGE_BACKEND": backend,
        "DATABASE_URL": "sqlite://",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "SECRET_KEY": "test-secret",
        "LOG_LEVEL": "WARNING",
        "GOOGLE_CLIENT_EMAIL": None,
        "GOOGLE_PRIVATE_KEY": None,
        "GOOGLE_DRIVE_FOLDER_ID": None,
        "GOOGLE_SHEET_ID": None,
        "BACK_OFFICE_EMAILS": "",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(params=["memory", "sql"])
def backend(request):
    return request.param


@pytest.fixture
def make_client(tmp_path, backend):
    """Factory for a client on a fresh app; keyword arguments override settings."""
    clients = []

    def _make(**overrides):
        app = create_app(build_settings(tmp_path, backend, **overrides))
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def app(client):
    return client.app


def register(client, email="shopper@mail.com", password="secret123", first_name="Ravi", last_name="Kumar"):
    response = client.post("/auth/register", json={
        "email": email,
        "password": password,
        "firstName": first_name,
        "lastName": last_name,
    })
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    return bearer(register(client)["accessToken"])


@pytest.fixture
def session_headers():
    return {"X-Session-Id": SESSION}


def add_to_cart(client, product_id, quantity=None, headers=None):
    payload = {"productId": product_id}
    if quantity is not None:
        payload["quantity"] = quantity
    response = client.post("/cart", json=payload, headers=headers or {"X-Session-Id": SESSION})
    assert response.status_code == 200, response.text
    return response.json()


def checkout(client, headers, billing=None, files=None):
    if files is None:
        files = {"paymentScreenshot": ("proof.png", PNG_BYTES, "image/png")}
    return client.post("/orders", data=billing or BILLING, files=files, headers=headers)
