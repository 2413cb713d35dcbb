"""
Pytest configuration and fixtures for all tests.

Every test gets a fresh in-memory SQLite database.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.container import build_container
from app.main import create_app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret_key="test-secret",
        bcrypt_rounds=4,
        log_level="DEBUG",
    )


@pytest.fixture
def container(settings):
    """Collaborators without the HTTP layer."""
    container = build_container(settings)
    container.database.create_all()
    yield container
    container.database.dispose()


@pytest.fixture
def student_service(container):
    return container.student_service


@pytest.fixture
def auth_service(container):
    return container.auth_service


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(client):
    """Register an admin, log in, return the Authorization header."""
    client.post("/api/auth/register", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}
