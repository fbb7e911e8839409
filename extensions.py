"""Flask extension instances shared by the blueprints."""

from flask import current_app
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from utils.mailer import Mailer

migrate = Migrate()
jwt = JWTManager()
mailer = Mailer()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[lambda: current_app.config.get("RATE_LIMIT", "60 per minute")],
)


def auth_rate_limit() -> str:
    """Stricter limit for endpoints that send email or check credentials."""

    return current_app.config.get("AUTH_RATE_LIMIT", "10 per minute")
