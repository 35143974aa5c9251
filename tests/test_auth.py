"""Tests for registration, login and bearer authentication."""

from typing import Dict

from fastapi.testclient import TestClient

from speakup.core.security import hash_password, verify_password, verify_webhook_secret


class TestPasswords:
    """Tests for password hashing helpers."""

    def test_hash_and_verify(self) -> None:
        """A hashed password verifies only against the original."""
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_verify_without_hash(self) -> None:
        """Accounts without a password never verify."""
        assert not verify_password("anything", None)


class TestWebhookSecret:
    """Tests for the shared payment webhook secret."""

    def test_matching_secret(self) -> None:
        assert verify_webhook_secret("test-webhook-secret")

    def test_wrong_or_missing_secret(self) -> None:
        assert not verify_webhook_secret("nope")
        assert not verify_webhook_secret(None)


class TestRegisterAndLogin:
    """Tests for /api/auth."""

    def test_register_returns_token(self, client: TestClient) -> None:
        """New accounts are students and get a token immediately."""
        response = client.post(
            "/api/auth/register",
            json={"email": "New@Example.com", "name": "New", "password": "password123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["role"] == "STUDENT"

    def test_register_duplicate_email(self, client: TestClient) -> None:
        """Emails are unique regardless of case."""
        payload = {"email": "dup@example.com", "name": "Dup", "password": "password123"}
        assert client.post("/api/auth/register", json=payload).status_code == 201

        payload["email"] = "DUP@example.com"
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 409

    def test_register_short_password(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/register",
            json={"email": "short@example.com", "name": "Short", "password": "123"},
        )
        assert response.status_code == 422

    def test_login(self, client: TestClient) -> None:
        """Registered credentials log in; wrong ones are rejected."""
        client.post(
            "/api/auth/register",
            json={"email": "login@example.com", "name": "Login", "password": "password123"},
        )

        ok = client.post("/api/auth/login", json={"email": "login@example.com", "password": "password123"})
        assert ok.status_code == 200
        assert ok.json()["access_token"]

        bad = client.post("/api/auth/login", json={"email": "login@example.com", "password": "wrongpass1"})
        assert bad.status_code == 401

    def test_token_authenticates(self, client: TestClient) -> None:
        """The issued token reaches protected endpoints."""
        token = client.post(
            "/api/auth/register",
            json={"email": "me@example.com", "name": "Me", "password": "password123"},
        ).json()["access_token"]

        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["email"] == "me@example.com"


class TestBearerAuth:
    """Tests for the session dependency."""

    def test_missing_token(self, client: TestClient) -> None:
        response = client.get("/api/users/me")
        assert response.status_code in (401, 403)

    def test_garbage_token(self, client: TestClient) -> None:
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_staff_only_endpoint(self, client: TestClient, student_headers: Dict[str, str]) -> None:
        """Students cannot reach staff endpoints."""
        response = client.get("/api/courses/", headers=student_headers)
        assert response.status_code == 403
