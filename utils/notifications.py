"""Transactional emails sent by the auth flows."""

from __future__ import annotations

from extensions import mailer


def send_verification_code(email: str, code: str, expires_in_minutes: int) -> None:
    """Email the one-time registration code; raises MailDeliveryError."""

    text = (
        f"Your verification code is {code}.\n\n"
        f"The code expires in {expires_in_minutes} minutes. "
        "If you did not create an account, ignore this email."
    )
    html = (
        "<p>Your verification code is:</p>"
        f"<p style=\"font-size:24px;font-weight:bold;letter-spacing:4px\">{code}</p>"
        f"<p>The code expires in {expires_in_minutes} minutes.</p>"
    )
    mailer.send(email, "Verify your email address", text, html)


def send_password_reset(email: str, reset_url: str, expires_in_minutes: int) -> None:
    """Email a password reset link; raises MailDeliveryError."""

    text = (
        "We received a request to reset your password.\n\n"
        f"Open this link to choose a new one: {reset_url}\n\n"
        f"The link expires in {expires_in_minutes} minutes."
    )
    html = (
        "<p>We received a request to reset your password.</p>"
        f"<p><a href=\"{reset_url}\">Choose a new password</a></p>"
        f"<p>The link expires in {expires_in_minutes} minutes.</p>"
    )
    mailer.send(email, "Reset your password", text, html)
