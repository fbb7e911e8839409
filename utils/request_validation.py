"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import TypeVar

from flask import Request
from pydantic import BaseModel, ValidationError
from werkzeug.exceptions import BadRequest

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_json_request(
    req: Request,
    *,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    return data


def _describe(error: dict) -> str:
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    kind = error.get("type")
    ctx = error.get("ctx") or {}

    if kind == "missing" or (kind == "string_too_short" and ctx.get("min_length") == 1):
        return f"{field} is required."
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return f"{field}: {error.get('msg')}."


def parse_request_model(
    req: Request, schema: type[SchemaT], *, allow_empty: bool = False
) -> SchemaT:
    """Validate the JSON body against ``schema`` and return the model."""

    data = parse_json_request(req, allow_empty=allow_empty)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise BadRequest(_describe(exc.errors()[0])) from exc
