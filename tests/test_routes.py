"""
HTTP-level tests for /api/v1/auth, with the service wired to an
in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from auth.dependencies import get_auth_service
from auth.errors import StorageUnavailable
from auth.service import AuthService
from main import create_app

PREFIX = "/api/v1/auth"


class _DownStore:
    async def find_by_email(self, email):
        raise StorageUnavailable("Credential store unavailable")

    async def create(self, email, password_hash):
        raise StorageUnavailable("Credential store unavailable")


@pytest.fixture
def client(service):
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: service
    # No context manager: startup (table creation) is not run.
    return TestClient(app)


class TestRegisterEndpoint:
    def test_register_returns_public_projection(self, client):
        resp = client.post(f"{PREFIX}/register", json={"email": "alice@example.com", "password": "secret123"})

        assert resp.status_code == 201
        body = resp.json()
        assert set(body) == {"id", "email", "created_at"}
        assert body["email"] == "alice@example.com"
        assert "secret123" not in resp.text
        assert "$2b$" not in resp.text

    def test_duplicate_register_conflicts(self, client):
        payload = {"email": "alice@example.com", "password": "secret123"}
        client.post(f"{PREFIX}/register", json=payload)

        resp = client.post(f"{PREFIX}/register", json={**payload, "password": "other"})
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Email already registered"

    def test_empty_fields_rejected(self, client):
        resp = client.post(f"{PREFIX}/register", json={"email": "", "password": ""})
        assert resp.status_code == 422

    def test_overlong_password_rejected(self, client):
        resp = client.post(f"{PREFIX}/register", json={"email": "a@example.com", "password": "x" * 73})
        assert resp.status_code == 422


class TestLoginEndpoint:
    def test_login_returns_access_token(self, client, service):
        client.post(f"{PREFIX}/register", json={"email": "alice@example.com", "password": "secret123"})

        resp = client.post(f"{PREFIX}/login", json={"email": "alice@example.com", "password": "secret123"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["tokenType"] == "bearer"
        assert service.authenticate_token(body["accessToken"]).email == "alice@example.com"

    def test_failures_are_indistinguishable(self, client):
        client.post(f"{PREFIX}/register", json={"email": "alice@example.com", "password": "secret123"})

        wrong = client.post(f"{PREFIX}/login", json={"email": "alice@example.com", "password": "wrong"})
        unknown = client.post(f"{PREFIX}/login", json={"email": "ghost@example.com", "password": "secret123"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"detail": "Invalid email or password"}
        assert wrong.headers["WWW-Authenticate"] == unknown.headers["WWW-Authenticate"] == "Bearer"


class TestMeEndpoint:
    def test_me_echoes_token_identity(self, client):
        created = client.post(
            f"{PREFIX}/register", json={"email": "alice@example.com", "password": "secret123"}
        ).json()
        token = client.post(
            f"{PREFIX}/login", json={"email": "alice@example.com", "password": "secret123"}
        ).json()["accessToken"]

        resp = client.get(f"{PREFIX}/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json() == {"id": created["id"], "email": "alice@example.com"}

    def test_me_requires_token(self, client):
        assert client.get(f"{PREFIX}/me").status_code == 401

    def test_me_rejects_bad_token(self, client):
        resp = client.get(f"{PREFIX}/me", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401
        assert resp.json()["detail"].startswith("Invalid or expired token")


class TestStorageFailure:
    def test_store_down_maps_to_503(self, auth_config):
        app = create_app()
        down = AuthService(_DownStore(), auth_config)
        app.dependency_overrides[get_auth_service] = lambda: down
        client = TestClient(app)

        creds = {"email": "alice@example.com", "password": "secret123"}
        assert client.post(f"{PREFIX}/register", json=creds).status_code == 503
        assert client.post(f"{PREFIX}/login", json=creds).status_code == 503


class TestUnencodableInput:
    # Lone surrogates are legal JSON escapes but cannot be encoded as UTF-8.
    def test_register_with_surrogate_password_is_rejected(self, client):
        resp = client.post(
            f"{PREFIX}/register",
            content='{"email": "b@x.io", "password": "\\ud800abc"}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422
        assert resp.json()["detail"] == "password: must be valid UTF-8"

    def test_register_with_surrogate_email_is_rejected(self, client):
        resp = client.post(
            f"{PREFIX}/register",
            content='{"email": "b\\udfff@x.io", "password": "secret123"}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422
        assert resp.json()["detail"] == "email: must be valid UTF-8"

    def test_login_with_surrogates_is_unauthorized(self, client):
        client.post(f"{PREFIX}/register", json={"email": "b@x.io", "password": "secret123"})

        for body in (
            '{"email": "b@x.io", "password": "\\ud800abc"}',
            '{"email": "b\\ud800@x.io", "password": "secret123"}',
        ):
            resp = client.post(
                f"{PREFIX}/login", content=body, headers={"Content-Type": "application/json"}
            )
            assert resp.status_code == 401
            assert resp.json() == {"detail": "Invalid email or password"}


class TestResponseHeaders:
    def test_auth_responses_are_not_cached(self, client):
        resp = client.post(f"{PREFIX}/register", json={"email": "a@example.com", "password": "pw"})
        assert resp.headers["Cache-Control"] == "no-store"
        assert resp.headers["Pragma"] == "no-cache"

        token_resp = client.post(f"{PREFIX}/login", json={"email": "a@example.com", "password": "pw"})
        assert token_resp.headers["Cache-Control"] == "no-store"

    def test_other_paths_keep_default_caching(self, client):
        resp = client.get("/docs")
        assert "Cache-Control" not in resp.headers

    def test_request_id_is_echoed_or_generated(self, client):
        echoed = client.get(f"{PREFIX}/me", headers={"X-Request-ID": "req-123"})
        assert echoed.headers["X-Request-ID"] == "req-123"

        generated = client.get(f"{PREFIX}/me")
        assert len(generated.headers["X-Request-ID"]) == 32
        assert "X-Process-Time" in generated.headers
