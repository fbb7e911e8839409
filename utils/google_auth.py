"""Server-side verification of Google Sign-In ID tokens."""

from __future__ import annotations

import requests
from flask import current_app

GOOGLE_ISSUERS = {"accounts.google.com", "https://accounts.google.com"}


class GoogleTokenError(ValueError):
    """Raised when an ID token is rejected."""


def verify_google_id_token(id_token: str) -> dict:
    """Validate ``id_token`` with Google's tokeninfo endpoint and return its claims."""

    config = current_app.config
    try:
        response = requests.get(
            config["GOOGLE_TOKENINFO_URL"],
            params={"id_token": id_token},
            timeout=config.get("HTTP_TIMEOUT", 10),
        )
    except requests.RequestException as exc:
        current_app.logger.warning("Google token verification failed: %s", exc)
        raise GoogleTokenError("Could not verify Google token.") from exc

    if response.status_code != 200:
        raise GoogleTokenError("Google token is invalid.")

    claims = response.json()
    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise GoogleTokenError("Google token has an unexpected issuer.")

    client_id = config.get("GOOGLE_CLIENT_ID")
    if client_id and claims.get("aud") != client_id:
        raise GoogleTokenError("Google token was issued for another client.")

    if not claims.get("email") or str(claims.get("email_verified")).lower() != "true":
        raise GoogleTokenError("Google account email is not verified.")

    return claims
