"""JWT issuance and Flask-JWT-Extended callbacks."""

from __future__ import annotations

from flask_jwt_extended import JWTManager, create_access_token, create_refresh_token

from models import db
from models.token_blocklist import TokenBlocklist
from models.user import User
from utils.responses import error_response


def create_user_access_token(user: User) -> str:
    """Access token with the user id as subject and a profile snapshot."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "displayName": user.display_name},
    )


def issue_token_pair(user: User) -> dict:
    return {
        "token": create_user_access_token(user),
        "refreshToken": create_refresh_token(identity=str(user.id)),
    }


def register_jwt_callbacks(jwt: JWTManager) -> None:
    """Wire user lookup, revocation and error bodies into ``jwt``."""

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    @jwt.token_in_blocklist_loader
    def _is_revoked(_jwt_header, jwt_payload) -> bool:
        return TokenBlocklist.is_revoked(jwt_payload["jti"])

    @jwt.unauthorized_loader
    def _missing_token(_reason):
        return error_response(401, "Authorization token is missing.")

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_payload):
        return error_response(401, "Token has expired. Please log in again.")

    @jwt.invalid_token_loader
    def _invalid_token(_reason):
        return error_response(401, "Token is invalid.")

    @jwt.revoked_token_loader
    def _revoked_token(_jwt_header, _jwt_payload):
        return error_response(401, "Token has been revoked.")

    @jwt.user_lookup_error_loader
    def _unknown_user(_jwt_header, _jwt_payload):
        return error_response(401, "User not found.")

    @jwt.needs_fresh_token_loader
    def _stale_token(_jwt_header, _jwt_payload):
        return error_response(401, "Fresh token required.")

    @jwt.token_verification_failed_loader
    def _failed_verification(_jwt_header, _jwt_payload):
        return error_response(401, "Token is invalid.")
