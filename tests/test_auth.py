"""Tests for the admin token gate."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from vcfolio.auth import check_password, create_admin_token, decode_admin_token
from vcfolio.exceptions import AdminAuthError

from conftest import ADMIN_PASSWORD

PROJECT = {"name": "Gated", "investment_date": "2024-01-01", "capital_invested": 1000}


class TestTokens:
    def test_check_password(self):
        assert check_password(ADMIN_PASSWORD) is True
        assert check_password("wrong") is False

    def test_round_trip(self):
        token, expires_at = create_admin_token()
        claims = decode_admin_token(token)
        assert claims["sub"] == "admin"
        assert expires_at > datetime.now(timezone.utc)

    def test_expired_token_rejected(self):
        token, _ = create_admin_token(now=datetime.now(timezone.utc) - timedelta(days=1))
        with pytest.raises(AdminAuthError, match="expired"):
            decode_admin_token(token)

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode(
            {"sub": "admin", "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())},
            "some-other-secret-key-123456", algorithm="HS256",
        )
        with pytest.raises(AdminAuthError):
            decode_admin_token(token)

    def test_non_admin_subject_rejected(self, test_settings):
        token = jwt.encode(
            {"sub": "visitor", "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())},
            test_settings.SECRET_KEY, algorithm="HS256",
        )
        with pytest.raises(AdminAuthError):
            decode_admin_token(token)


class TestAuthEndpoints:
    def test_login(self, client):
        resp = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]

    def test_login_wrong_password(self, client):
        resp = client.post("/api/auth/login", json={"password": "guess"})
        assert resp.status_code == 403
        assert resp.json()["code"] == "ADMIN_AUTH_REQUIRED"

    def test_verify(self, client, admin_headers):
        resp = client.get("/api/auth/verify", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["subject"] == "admin"

    def test_mutation_without_token(self, client):
        resp = client.post("/api/projects", json=PROJECT)
        assert resp.status_code == 403
        assert client.get("/api/projects").json() == []

    def test_mutation_with_garbage_token(self, client):
        resp = client.post(
            "/api/projects", json=PROJECT,
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert resp.status_code == 403

    def test_legacy_admin_headers_not_accepted(self, client):
        resp = client.post(
            "/api/projects", json=PROJECT,
            headers={"X-Admin-Auth": "true", "X-Admin-Token": "anything"},
        )
        assert resp.status_code == 403

    def test_delete_requires_token(self, client, admin_headers):
        project_id = client.post("/api/projects", json=PROJECT, headers=admin_headers).json()["id"]
        assert client.delete(f"/api/projects/{project_id}").status_code == 403
        assert client.get(f"/api/projects/{project_id}").status_code == 200
