"""
Integration test configuration.

Builds the real application with create_app() on an in-memory SQLite
database. The email transport and the Google verifier are swapped out with
app.dependency_overrides so no network calls are made.
"""

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings, DatabaseSettings, EmailSettings, GoogleSettings
from dependencies import get_email_provider, get_google_verifier


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in integration tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def make_settings(jwt_settings, fast_auth_settings):
    def _make(**auth_overrides) -> AppSettings:
        auth = fast_auth_settings.model_copy(update=auth_overrides)
        return AppSettings(
            env="test",
            db=DatabaseSettings(database_url="sqlite+aiosqlite://"),
            jwt=jwt_settings,
            google=GoogleSettings(google_client_id="client-123"),
            email=EmailSettings(brevo_api_key="", smtp_user="", smtp_password=""),
            auth=auth,
        )

    return _make


@pytest.fixture
def make_client(make_settings, fake_email, fake_google):
    clients = []

    def _make(**auth_overrides) -> TestClient:
        app = create_app(make_settings(**auth_overrides))
        app.dependency_overrides[get_email_provider] = lambda: fake_email
        app.dependency_overrides[get_google_verifier] = lambda: fake_google
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def signed_in(client, fake_email):
    """Sign up, verify by OTP and return (auth headers, user json)."""

    def _sign_in(email="ann@example.com", password="12345678", name="Ann"):
        assert client.post(
            "/api/auth/signup", json={"email": email, "password": password, "name": name}
        ).status_code == 201
        assert client.post("/api/auth/send-otp", json={"email": email}).status_code == 200
        resp = client.post(
            "/api/auth/verify-otp",
            json={"email": email, "otp": fake_email.last_code_for(email)},
        )
        assert resp.status_code == 200
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _sign_in
