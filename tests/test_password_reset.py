"""Tests for forgot/reset/change password."""

from __future__ import annotations

import re

from extensions import mailer
from models import db
from models.user import User
from utils.mailer import MailDeliveryError


def _reset_token(message) -> str:
    body = message.get_body(preferencelist=("plain",)).get_content()
    match = re.search(r"https://app\.example\.com/reset-password/(\S+)", body)
    assert match, body
    return match.group(1)


def _login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_forgot_password_emails_reset_link(client, outbox, make_user):
    make_user("reader@example.com", "Password123")

    response = client.post("/api/auth/forgot-password", json={"email": "reader@example.com"})

    assert response.status_code == 200
    assert len(outbox) == 1
    assert outbox[0]["To"] == "reader@example.com"
    token = _reset_token(outbox[0])

    reset = client.post(
        "/api/auth/reset-password", json={"token": token, "password": "BrandNew123"}
    )
    assert reset.status_code == 200

    assert _login(client, "reader@example.com", "Password123").status_code == 401
    assert _login(client, "reader@example.com", "BrandNew123").status_code == 200

    reuse = client.post(
        "/api/auth/reset-password", json={"token": token, "password": "Another123"}
    )
    assert reuse.status_code == 400
    assert reuse.get_json()["message"] == "Reset token is invalid or has expired."


def test_forgot_password_unknown_email_looks_the_same(client, outbox, make_user):
    make_user("reader@example.com")

    known = client.post("/api/auth/forgot-password", json={"email": "reader@example.com"})
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json()
    assert len(outbox) == 1


def test_forgot_password_mail_failure_keeps_no_token(app, client, make_user, monkeypatch):
    user_id = make_user("reader@example.com")

    def _fail(*args, **kwargs):
        raise MailDeliveryError("smtp down")

    monkeypatch.setattr(mailer, "send", _fail)

    response = client.post("/api/auth/forgot-password", json={"email": "reader@example.com"})

    assert response.status_code == 500
    with app.app_context():
        assert db.session.get(User, user_id).reset_password_token is None


def test_reset_password_validates_input(client):
    bad_token = client.post(
        "/api/auth/reset-password", json={"token": "nope", "password": "BrandNew123"}
    )
    short = client.post("/api/auth/reset-password", json={"token": "nope", "password": "short"})

    assert bad_token.status_code == 400
    assert short.status_code == 400
    assert short.get_json()["message"] == "Password must be at least 8 characters."


def test_change_password(client, make_user, auth_headers):
    headers = auth_headers(make_user("reader@example.com", "Password123"))

    wrong = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "nope-nope", "newPassword": "BrandNew123"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.get_json()["message"] == "Current password is incorrect."

    ok = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "Password123", "newPassword": "BrandNew123"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert _login(client, "reader@example.com", "BrandNew123").status_code == 200
