"""
Shared pytest fixtures for the Maplas test suite.

Every test gets a fresh SQLite file and an app built with fixed secrets.
"""

import pytest

from maplas import create_app
from maplas.config import Settings

ADMIN_CODE = "test-admin-code"
SECRET_KEY = "test-signing-key"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database=tmp_path / "maplas-test.db",
        secret_key=SECRET_KEY,
        admin_secret=ADMIN_CODE,
        upload_folder=tmp_path / "uploads",
        max_upload_bytes=1024 * 1024,
        leaderboard_size=10,
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    def _register(username, password="secret1", secret_code=None):
        payload = {"username": username, "password": password}
        if secret_code is not None:
            payload["secret_code"] = secret_code
        return client.post("/api/register", json=payload)

    return _register


@pytest.fixture
def login_headers(client, register):
    """Register (if needed) and log in, returning Authorization headers."""

    def _login(username, password="secret1", secret_code=None):
        register(username, password, secret_code)
        response = client.post("/api/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _login


@pytest.fixture
def admin_headers(login_headers):
    return login_headers("admin", "adminpass", ADMIN_CODE)


@pytest.fixture
def user_headers(login_headers):
    return login_headers("alice")


@pytest.fixture
def make_place(client):
    def _make_place(headers=None, **overrides):
        payload = {
            "name": "Galata Kulesi",
            "description": "Medieval stone tower",
            "lat": 41.0256,
            "lng": 28.9742,
            "category": "history",
            "city": "istanbul",
        }
        payload.update(overrides)
        response = client.post("/api/places", json=payload, headers=headers or {})
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make_place


@pytest.fixture
def approve(client, admin_headers):
    def _approve(place_id):
        response = client.post("/api/admin?action=approve", json={"id": place_id}, headers=admin_headers)
        assert response.status_code == 200, response.get_json()
        return response.get_json()

    return _approve


@pytest.fixture
def points(client):
    def _points(headers):
        response = client.get("/api/user", headers=headers)
        assert response.status_code == 200, response.get_json()
        return response.get_json()["points"]

    return _points
