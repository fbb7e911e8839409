"""Authentication blueprint: registration, verification, login and account management."""

from __future__ import annotations

import re
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, get_jwt, jwt_required
from sqlalchemy import func, or_
from werkzeug.exceptions import (
    BadRequest,
    Forbidden,
    InternalServerError,
    NotFound,
    Unauthorized,
)

from extensions import auth_rate_limit, limiter
from models import db
from models.article_interaction import ArticleInteraction
from models.comment import purge_user_activity, refresh_author
from models.pending_registration import PendingRegistration
from models.token_blocklist import TokenBlocklist
from models.user import User
from schemas import (
    ChangePasswordRequest,
    DisplayNameRequest,
    EmailRequest,
    GoogleLoginRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from utils.google_auth import GoogleTokenError, verify_google_id_token
from utils.mailer import MailDeliveryError
from utils.notifications import send_password_reset, send_verification_code
from utils.request_validation import parse_request_model
from utils.tokens import create_user_access_token, issue_token_pair

auth_bp = Blueprint("auth", __name__)


def _normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def _require_user() -> User:
    user = get_current_user()
    if user is None:
        raise NotFound("User not found.")
    return user


def _auth_response(user: User, status: int, message: str):
    payload = {"success": True, "message": message, "user": user.to_dict()}
    payload.update(issue_token_pair(user))
    return jsonify(payload), status


def _name_taken(name: str, exclude_user_id: int | None = None) -> bool:
    """Case-insensitive check against usernames and display names."""

    lowered = name.lower()
    query = User.query.filter(
        or_(func.lower(User.username) == lowered, func.lower(User.display_name) == lowered)
    )
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def _unique_username(seed: str) -> str:
    base = re.sub(r"[^a-zA-Z0-9_.]", "", seed)[:50] or "user"
    candidate = base
    suffix = 1
    while (
        _name_taken(candidate)
        or PendingRegistration.query.filter_by(username=candidate).first() is not None
    ):
        suffix += 1
        candidate = f"{base}{suffix}"
    return candidate


def _deliver_code(email: str, code: str) -> None:
    minutes = current_app.config["OTP_EXPIRE_MINUTES"]
    try:
        send_verification_code(email, code, minutes)
    except MailDeliveryError as exc:
        db.session.rollback()
        raise InternalServerError(
            "Could not send the verification email. Please try again."
        ) from exc


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(auth_rate_limit)
def register():
    """Stage a registration and email a one-time verification code."""

    body = parse_request_model(request, RegisterRequest)
    email = _normalize_email(body.email)
    username = body.username

    PendingRegistration.purge_expired(
        current_app.config["PENDING_REGISTRATION_GRACE_MINUTES"]
    )

    if User.find_by_email(email) is not None:
        raise BadRequest("Email is already registered.")
    if _name_taken(username):
        raise BadRequest("Username is already taken.")
    held = PendingRegistration.query.filter(
        func.lower(PendingRegistration.username) == username.lower(),
        PendingRegistration.email != email,
    ).first()
    if held is not None:
        raise BadRequest("Username is already taken.")

    pending = PendingRegistration.query.filter_by(email=email).first()
    if pending is None:
        pending = PendingRegistration(email=email)
        db.session.add(pending)
    pending.username = username
    pending.set_password(body.password)
    code = pending.issue_otp(current_app.config["OTP_EXPIRE_MINUTES"])
    db.session.flush()

    _deliver_code(email, code)
    db.session.commit()
    current_app.logger.info("Verification code sent to %s", email)

    return (
        jsonify(
            {
                "success": True,
                "message": "Registration received. Check your email for the verification code.",
                "email": email,
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/verify", methods=["POST"])
@limiter.limit(auth_rate_limit)
def verify_email():
    """Confirm the emailed code and create the account."""

    body = parse_request_model(request, VerifyEmailRequest)
    email = _normalize_email(body.email)

    pending = PendingRegistration.query.filter_by(email=email).first()
    if pending is None or not pending.check_otp(body.otp):
        raise BadRequest("Invalid or expired verification code.")

    if User.find_by_email(email) is not None:
        db.session.delete(pending)
        db.session.commit()
        raise BadRequest("Email is already registered.")
    if _name_taken(pending.username):
        db.session.delete(pending)
        db.session.commit()
        raise BadRequest("Username is already taken. Please register again.")

    user = User(
        username=pending.username,
        email=email,
        password_hash=pending.password_hash,
        display_name=pending.username,
        is_email_verified=True,
    )
    user.touch_login()
    db.session.add(user)
    db.session.delete(pending)
    db.session.commit()
    current_app.logger.info("Email verified for user %s", user.id)

    return _auth_response(user, HTTPStatus.CREATED, "Email verified successfully.")


@auth_bp.route("/resend", methods=["POST"])
@limiter.limit(auth_rate_limit)
def resend_verification():
    """Issue a fresh code for a pending registration."""

    body = parse_request_model(request, EmailRequest)
    email = _normalize_email(body.email)

    if User.find_by_email(email) is not None:
        raise BadRequest("Email is already verified.")

    pending = PendingRegistration.query.filter_by(email=email).first()
    if pending is None:
        raise NotFound("No pending registration for this email.")

    code = pending.issue_otp(current_app.config["OTP_EXPIRE_MINUTES"])
    _deliver_code(email, code)
    db.session.commit()

    return jsonify({"success": True, "message": "A new verification code has been sent."})


@auth_bp.route("/check-expiry", methods=["POST"])
def check_otp_expiry():
    """Report whether the pending code for an email has expired."""

    body = parse_request_model(request, EmailRequest)
    pending = PendingRegistration.query.filter_by(
        email=_normalize_email(body.email)
    ).first()
    if pending is None:
        raise NotFound("No pending registration for this email.")

    return jsonify(
        {
            "expired": pending.is_expired(),
            "expiresAt": pending.otp_expires_at.isoformat(),
        }
    )


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(auth_rate_limit)
def login():
    """Authenticate a user and return an access/refresh token pair."""

    body = parse_request_model(request, LoginRequest)
    email = _normalize_email(body.email)

    user = User.find_by_email(email)
    if user is None or not user.check_password(body.password):
        current_app.logger.info("Failed login for %s", email)
        raise Unauthorized("Invalid email or password.")

    if not user.is_email_verified:
        raise Forbidden("Email address has not been verified.")

    user.touch_login()
    db.session.commit()

    return _auth_response(user, HTTPStatus.OK, "Login successful.")


@auth_bp.route("/google", methods=["POST"])
def google_login():
    """Sign in (or sign up) with a Google ID token."""

    body = parse_request_model(request, GoogleLoginRequest)
    try:
        claims = verify_google_id_token(body.id_token)
    except GoogleTokenError as exc:
        raise Unauthorized(str(exc)) from exc

    email = _normalize_email(claims["email"])
    google_id = str(claims.get("sub") or "")

    user = None
    if google_id:
        user = User.query.filter_by(google_id=google_id).first()
    if user is None:
        user = User.find_by_email(email)

    status = HTTPStatus.OK
    if user is None:
        username = _unique_username(email.split("@", 1)[0])
        name = (claims.get("name") or "").strip()[:64]
        user = User(
            username=username,
            email=email,
            google_id=google_id or None,
            display_name=name if name and not _name_taken(name) else username,
            photo_url=claims.get("picture"),
            is_email_verified=True,
        )
        user.set_unusable_password()
        db.session.add(user)
        PendingRegistration.query.filter_by(email=email).delete(synchronize_session=False)
        status = HTTPStatus.CREATED
    else:
        user.google_id = user.google_id or google_id or None
        user.is_email_verified = True
        if not user.photo_url and claims.get("picture"):
            user.photo_url = claims["picture"]

    user.touch_login()
    db.session.commit()

    return _auth_response(user, status, "Google login successful.")


@auth_bp.route("/forgot-password", methods=["POST"])
@limiter.limit(auth_rate_limit)
def forgot_password():
    """Email a time-limited reset link when the address belongs to a user."""

    body = parse_request_model(request, EmailRequest)
    email = _normalize_email(body.email)
    user = User.find_by_email(email)

    if user is not None:
        minutes = current_app.config["RESET_TOKEN_EXPIRE_MINUTES"]
        raw_token = user.issue_password_reset(minutes)
        reset_url = f"{current_app.config['FRONTEND_URL'].rstrip('/')}/reset-password/{raw_token}"
        try:
            send_password_reset(email, reset_url, minutes)
        except MailDeliveryError as exc:
            db.session.rollback()
            raise InternalServerError(
                "Could not send the password reset email. Please try again."
            ) from exc
        db.session.commit()

    return jsonify(
        {
            "success": True,
            "message": "If that email is registered, a password reset link has been sent.",
        }
    )


@auth_bp.route("/reset-password", methods=["POST"])
@limiter.limit(auth_rate_limit)
def reset_password():
    """Set a new password using an emailed reset token."""

    body = parse_request_model(request, ResetPasswordRequest)
    user = User.find_by_reset_token(body.token)
    if user is None:
        raise BadRequest("Reset token is invalid or has expired.")

    user.set_password(body.password)
    user.clear_password_reset()
    db.session.commit()

    return jsonify({"success": True, "message": "Password has been reset."})


@auth_bp.route("/change-password", methods=["POST"])
@jwt_required()
def change_password():
    """Replace the password after checking the current one."""

    user = _require_user()
    body = parse_request_model(request, ChangePasswordRequest)
    if not user.check_password(body.current_password):
        raise BadRequest("Current password is incorrect.")

    user.set_password(body.new_password)
    db.session.commit()

    return jsonify({"success": True, "message": "Password changed successfully."})


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh_token():
    """Exchange a refresh token for a new access token."""

    user = _require_user()
    return jsonify({"success": True, "token": create_user_access_token(user)})


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    """Revoke the presented access token."""

    user = _require_user()
    claims = get_jwt()
    db.session.add(
        TokenBlocklist(jti=claims["jti"], token_type=claims.get("type", "access"), user_id=user.id)
    )
    db.session.commit()

    return jsonify({"success": True, "message": "Logged out."})


@auth_bp.route("/check-email", methods=["POST"])
def check_email_exists():
    body = parse_request_model(request, EmailRequest)
    exists = User.find_by_email(_normalize_email(body.email)) is not None
    return jsonify({"exists": exists})


@auth_bp.route("/check-displayname", methods=["POST"])
def check_display_name_exists():
    body = parse_request_model(request, DisplayNameRequest)
    return jsonify({"exists": _name_taken(body.display_name)})


@auth_bp.route("/verified", methods=["GET"])
@jwt_required()
def email_verified_status():
    user = _require_user()
    return jsonify({"isEmailVerified": user.is_email_verified})


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def get_profile():
    """Return the caller's public profile."""

    user = _require_user()
    return jsonify({"success": True, "user": user.to_dict()})


@auth_bp.route("/profile", methods=["POST"])
@jwt_required()
def update_profile():
    """Update display name and/or photo URL."""

    user = _require_user()
    body = parse_request_model(request, ProfileUpdateRequest)
    apply_profile_update(user, body.display_name, body.photo_url)
    db.session.commit()

    return jsonify({"success": True, "message": "Profile updated.", "user": user.to_dict()})


def apply_profile_update(user: User, display_name: str | None, photo_url: str | None = None) -> None:
    """Validate and apply profile changes, keeping comment authorship in sync."""

    if display_name is None and photo_url is None:
        raise BadRequest("Nothing to update.")

    if display_name is not None and display_name != user.display_name:
        if _name_taken(display_name, exclude_user_id=user.id):
            raise BadRequest("Display name is already taken.")
        user.display_name = display_name
    if photo_url is not None:
        user.photo_url = photo_url or None

    refresh_author(user)


@auth_bp.route("/account", methods=["DELETE"])
@jwt_required()
def delete_account():
    """Delete the caller together with their comments and interactions."""

    user = _require_user()
    user_id = user.id

    purge_user_activity(user_id)
    ArticleInteraction.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("Deleted account %s", user_id)

    return jsonify({"success": True, "message": "Account deleted."})
