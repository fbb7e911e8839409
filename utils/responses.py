"""Uniform JSON error bodies."""

from __future__ import annotations

import uuid
from http import HTTPStatus

from flask import Response, g, jsonify


def current_request_id() -> str:
    request_id = g.get("request_id")
    if not request_id:
        request_id = str(uuid.uuid4())
        g.request_id = request_id
    return request_id


def error_payload(status: int, message: str, error: str | None = None) -> dict:
    return {
        "success": False,
        "message": message,
        "error": error or HTTPStatus(status).phrase,
        "request_id": current_request_id(),
    }


def error_response(status: int, message: str, error: str | None = None) -> tuple[Response, int]:
    """Return a ``(response, status)`` pair with the standard error body."""

    response = jsonify(error_payload(status, message, error))
    response.headers.setdefault("X-Request-ID", current_request_id())
    return response, status
