"""User model definition."""

from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


def hash_token(raw_token: str) -> str:
    """Return the SHA-256 hex digest stored in place of a raw token."""

    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class User(db.Model):
    """Represents a registered reader with a verified email address."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(64), unique=True, nullable=True)
    photo_url = db.Column(db.String(512), nullable=True)
    is_email_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.text("false"),
    )
    google_id = db.Column(db.String(255), unique=True, nullable=True)
    reset_password_token = db.Column(db.String(64), nullable=True, index=True)
    reset_password_expires = db.Column(db.DateTime, nullable=True)
    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    comments = db.relationship(
        "Comment",
        back_populates="user",
        lazy="dynamic",
        passive_deletes=True,
    )
    interactions = db.relationship(
        "ArticleInteraction",
        back_populates="user",
        lazy="dynamic",
        passive_deletes=True,
    )
    comment_likes = db.relationship(
        "CommentLike",
        back_populates="user",
        lazy="dynamic",
        passive_deletes=True,
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def set_unusable_password(self) -> None:
        """Give accounts created through Google a password nobody knows."""

        self.set_password(secrets.token_urlsafe(32))

    def issue_password_reset(self, expires_in_minutes: int) -> str:
        """Store a hashed reset token and return the raw token to email."""

        raw_token = secrets.token_urlsafe(32)
        self.reset_password_token = hash_token(raw_token)
        self.reset_password_expires = datetime.utcnow() + timedelta(
            minutes=expires_in_minutes
        )
        return raw_token

    def clear_password_reset(self) -> None:
        self.reset_password_token = None
        self.reset_password_expires = None

    @classmethod
    def find_by_reset_token(cls, raw_token: str) -> User | None:
        """Return the user holding an unexpired reset token, if any."""

        return cls.query.filter(
            cls.reset_password_token == hash_token(raw_token),
            cls.reset_password_expires > datetime.utcnow(),
        ).first()

    @classmethod
    def find_by_email(cls, email: str) -> User | None:
        return cls.query.filter_by(email=(email or "").strip().lower()).first()

    @property
    def public_name(self) -> str:
        return self.display_name or self.email

    def touch_login(self) -> None:
        self.last_login = datetime.utcnow()

    def to_dict(self) -> dict:
        """Serialize the public profile fields."""

        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "displayName": self.display_name,
            "photoUrl": self.photo_url,
            "isEmailVerified": self.is_email_verified,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
