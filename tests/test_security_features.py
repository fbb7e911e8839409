"""Tests covering security and hardening features."""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

from flask import Flask
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app
from config import Config
from models import db


class _SecurityBaseConfig(Config):
    TESTING = True
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-1234"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAIL_SUPPRESS_SEND = True


def _build_app(tmp_path: Path, **overrides) -> Flask:
    upload_dir = tmp_path / "uploads"

    class TestConfig(_SecurityBaseConfig):
        UPLOAD_DIR = str(upload_dir)

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    return create_app(TestConfig)


def test_cors_allows_configured_origin(tmp_path):
    app = _build_app(tmp_path, CORS_ORIGINS=["https://client.example"])
    client = app.test_client()

    response = client.get(
        "/health", headers={"Origin": "https://client.example"}
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"
    assert response.headers.get("X-Request-ID")


def test_rate_limit_exceeded_returns_json(tmp_path):
    app = _build_app(tmp_path, RATE_LIMIT="2 per minute", RATELIMIT_ENABLED=True)
    client = app.test_client()

    client.get("/health")
    client.get("/health")
    response = client.get("/health")

    assert response.status_code == 429
    payload = response.get_json()
    assert payload["error"] == "Too Many Requests"
    assert payload["success"] is False
    assert "request_id" in payload


def test_json_error_shape_for_invalid_request(tmp_path):
    app = _build_app(tmp_path, RATELIMIT_ENABLED=False)
    client = app.test_client()

    response = client.post(
        "/api/auth/register",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Bad Request"
    assert payload["success"] is False
    assert "Request content type" in payload["message"]
    assert payload["request_id"]


def test_missing_token_message(tmp_path):
    app = _build_app(tmp_path, RATELIMIT_ENABLED=False)
    client = app.test_client()

    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.get_json()["message"] == "Authorization token is missing."


def test_malformed_token_message(tmp_path):
    app = _build_app(tmp_path, RATELIMIT_ENABLED=False)
    client = app.test_client()

    response = client.get(
        "/api/auth/profile", headers={"Authorization": "Bearer not.a.jwt"}
    )

    assert response.status_code == 401
    assert response.get_json()["message"] == "Token is invalid."


def test_expired_token_message(tmp_path):
    app = _build_app(tmp_path, RATELIMIT_ENABLED=False)
    client = app.test_client()

    with app.app_context():
        token = create_access_token(identity="1", expires_delta=timedelta(seconds=-10))

    response = client.get(
        "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.get_json()["message"] == "Token has expired. Please log in again."


def test_code_and_reset_endpoints_use_auth_rate_limit(tmp_path):
    app = _build_app(
        tmp_path,
        RATELIMIT_ENABLED=True,
        RATE_LIMIT="100 per minute",
        AUTH_RATE_LIMIT="3 per minute",
    )
    with app.app_context():
        db.create_all()
    client = app.test_client()

    verify = [
        client.post("/api/auth/verify", json={"email": "a@x.com", "otp": "000000"})
        for _ in range(4)
    ]
    reset = [
        client.post(
            "/api/auth/reset-password", json={"token": "nope", "password": "BrandNew123"}
        )
        for _ in range(4)
    ]

    assert [r.status_code for r in verify] == [400, 400, 400, 429]
    assert [r.status_code for r in reset] == [400, 400, 400, 429]
    assert verify[-1].get_json()["error"] == "Too Many Requests"
