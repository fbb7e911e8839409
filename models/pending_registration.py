"""Registrations waiting for their email verification code."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


def generate_otp(length: int = 6) -> str:
    """Return a numeric one-time code."""

    return "".join(secrets.choice("0123456789") for _ in range(length))


class PendingRegistration(db.Model):
    """Holds sign-up data until the emailed code is confirmed."""

    __tablename__ = "pending_registrations"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(64), nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    otp_hash = db.Column(db.String(255), nullable=False)
    otp_expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def issue_otp(self, expires_in_minutes: int) -> str:
        """Replace the stored code with a fresh one and return it."""

        code = generate_otp()
        self.otp_hash = generate_password_hash(code)
        self.otp_expires_at = datetime.utcnow() + timedelta(minutes=expires_in_minutes)
        return code

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.utcnow()
        return self.otp_expires_at <= now

    def check_otp(self, code: str) -> bool:
        """Return True if ``code`` matches and has not expired."""

        if not code or self.is_expired():
            return False
        return check_password_hash(self.otp_hash, code)

    @classmethod
    def purge_expired(cls, grace_minutes: int = 0) -> int:
        """Delete registrations whose code expired more than ``grace_minutes`` ago.

        The caller commits.
        """

        cutoff = datetime.utcnow() - timedelta(minutes=grace_minutes)
        return cls.query.filter(cls.otp_expires_at <= cutoff).delete(
            synchronize_session=False
        )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<PendingRegistration {self.email}>"
