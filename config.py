"""Application configuration module."""

import os
from datetime import timedelta
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path("workspace") / "uploads"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Tokens
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        hours=int(os.getenv("JWT_ACCESS_TOKEN_HOURS", str(7 * 24)))
    )
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(
        days=int(os.getenv("JWT_REFRESH_TOKEN_DAYS", "30"))
    )

    # Email verification and password reset
    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", "10"))
    # Expired registrations stay resendable for this long before being purged.
    PENDING_REGISTRATION_GRACE_MINUTES = int(
        os.getenv("PENDING_REGISTRATION_GRACE_MINUTES", str(24 * 60))
    )
    RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "30"))
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Mail transport
    MAIL_SERVER = os.getenv("EMAIL_HOST", "localhost")
    MAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
    MAIL_USE_TLS = _env_bool("EMAIL_USE_TLS", True)
    MAIL_USERNAME = os.getenv("EMAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("EMAIL_FROM", "no-reply@localhost")
    MAIL_SENDER_NAME = os.getenv("EMAIL_FROM_NAME", "Aplikasi Berita")
    MAIL_TIMEOUT = int(os.getenv("EMAIL_TIMEOUT", "10"))
    MAIL_SUPPRESS_SEND = _env_bool("MAIL_SUPPRESS_SEND", False)

    # Profile images
    MAX_IMAGE_SIZE = int(os.getenv("MAX_IMAGE_SIZE", str(5 * 1024 * 1024)))

    # Third parties
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
    GOOGLE_TOKENINFO_URL = os.getenv(
        "GOOGLE_TOKENINFO_URL", "https://oauth2.googleapis.com/tokeninfo"
    )
    NEWS_API_BASE_URL = os.getenv(
        "NEWS_API_BASE_URL", "https://berita-indo-api-next.vercel.app/api/cnn-news"
    )
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "10 per minute")
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")
