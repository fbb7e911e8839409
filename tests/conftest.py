"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Callable

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-1234"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-1234"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAIL_SUPPRESS_SEND = True
    RATELIMIT_ENABLED = False
    GOOGLE_CLIENT_ID = "test-client-id.apps.googleusercontent.com"
    FRONTEND_URL = "https://app.example.com"


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def outbox(app: Flask) -> list:
    """Messages captured instead of being sent over SMTP."""

    return app.extensions["mail_outbox"]


@pytest.fixture()
def make_user(app: Flask) -> Callable[..., int]:
    """Persist a verified user and return its id."""

    def _make_user(
        email: str = "reader@example.com",
        password: str = "Password123",
        username: str | None = None,
        *,
        verified: bool = True,
    ) -> int:
        username = username or email.split("@", 1)[0]
        with app.app_context():
            user = User(
                username=username,
                email=email,
                display_name=username,
                is_email_verified=verified,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture()
def auth_headers(app: Flask) -> Callable[[int], dict[str, str]]:
    """Build a bearer header for a user id."""

    def _auth_headers(user_id: int) -> dict[str, str]:
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


def extract_code(message) -> str:
    """Pull the six-digit code out of a verification email."""

    body = message.get_body(preferencelist=("plain",)).get_content()
    match = re.search(r"\b(\d{6})\b", body)
    assert match, body
    return match.group(1)


@pytest.fixture()
def latest_code(outbox: list) -> Callable[[], str]:
    """Return the code from the most recent verification email."""

    def _latest_code() -> str:
        assert outbox, "no email was sent"
        return extract_code(outbox[-1])

    return _latest_code
