"""
API tests for /auth and the shared error envelope.
"""

from hiretrack.utils.auth import create_access_token


def _signup(client, email="new.user@example.com", password="password123", **extra):
    return client.post("/auth/signup", json={"email": email, "password": password, **extra})


class TestSignupAndLogin:
    """Tests for account creation and login."""

    def test_signup_returns_tokens(self, client):
        """Should create an applicant and return a token pair."""
        response = _signup(client, fullName="New User")

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["refreshToken"]
        assert body["user"]["email"] == "new.user@example.com"
        assert body["user"]["full_name"] == "New User"
        assert body["user"]["role"] == "applicant"

    def test_signup_role_is_restricted(self, client):
        """Should refuse privileged roles at signup but allow an HR admin."""
        refused = _signup(client, email="boss@example.com", role="super_admin")
        assert refused.status_code == 400
        assert refused.json()["errors"][0]["field"] == "role"

        allowed = _signup(client, email="hr@example.com", role="hr_admin")
        assert allowed.status_code == 200
        assert allowed.json()["user"]["role"] == "hr_admin"

    def test_duplicate_email(self, client):
        """Should answer 409 for an email already in use, ignoring case."""
        _signup(client)
        response = _signup(client, email="New.User@example.com")

        assert response.status_code == 409
        assert response.json() == {"detail": "User already exists"}

    def test_validation_envelope(self, client):
        """Should answer 400 with per-field errors."""
        response = _signup(client, email="not-an-email", password="short")

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Validation error"
        assert {error["field"] for error in body["errors"]} == {"email", "password"}

    def test_login(self, client, applicant):
        """Should log in with the right password only."""
        ok = client.post("/auth/login", json={"email": applicant.email, "password": "password123"})
        bad = client.post("/auth/login", json={"email": applicant.email, "password": "wrong-password"})

        assert ok.status_code == 200
        assert ok.json()["user"]["id"] == applicant.id
        assert bad.status_code == 401
        assert bad.json()["detail"] == "Invalid credentials"


class TestTokens:
    """Tests for refresh rotation and bearer auth."""

    def test_refresh_rotates(self, client):
        """Should issue a new refresh token and reject the old one."""
        old = _signup(client).json()["refreshToken"]

        response = client.post("/auth/refresh", json={"refreshToken": old})
        assert response.status_code == 200
        new = response.json()["refreshToken"]
        assert new != old

        assert client.post("/auth/refresh", json={"refreshToken": old}).status_code == 401
        assert client.post("/auth/refresh", json={"refreshToken": new}).status_code == 200

    def test_me(self, client, applicant, auth_headers):
        """Should return the current user for a valid token."""
        response = client.get("/auth/me", headers=auth_headers(applicant))

        assert response.status_code == 200
        assert response.json()["email"] == applicant.email

    def test_missing_token(self, client):
        """Should answer 401 without a bearer token."""
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Access token required"

    def test_bad_and_expired_tokens(self, client, applicant):
        """Should answer 401 for garbage and for expired tokens."""
        expired = create_access_token(applicant, expires_minutes=-1)

        for token in ("garbage", expired):
            response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
            assert response.status_code == 401
            assert response.json()["detail"] == "Invalid or expired token"


class TestRootEndpoints:
    """Tests for the health and root endpoints."""

    def test_health(self, client):
        """Should report ok with a timestamp."""
        body = client.get("/health").json()
        assert body["ok"] is True
        assert body["timestamp"]

    def test_root(self, client):
        """Should describe the API."""
        body = client.get("/").json()
        assert body["documentation"] == "/docs"
        assert "/api/jobs" in body["endpoints"].values()
