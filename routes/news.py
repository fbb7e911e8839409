"""News proxy blueprint: pass-through to the upstream news category API."""

from __future__ import annotations

import requests
from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import BadGateway, BadRequest

news_bp = Blueprint("news", __name__)

NEWS_CATEGORIES = (
    "nasional",
    "internasional",
    "ekonomi",
    "olahraga",
    "teknologi",
    "hiburan",
    "terbaru",
)


def fetch_category(category: str):
    """Return the upstream JSON document for ``category``."""

    base_url = current_app.config["NEWS_API_BASE_URL"].rstrip("/")
    response = requests.get(
        f"{base_url}/{category}",
        timeout=current_app.config.get("HTTP_TIMEOUT", 10),
    )
    response.raise_for_status()
    return response.json()


@news_bp.route("/<category>", methods=["GET"])
def news_by_category(category: str):
    if category not in NEWS_CATEGORIES:
        raise BadRequest("Invalid news category.")

    try:
        data = fetch_category(category)
    except (requests.RequestException, ValueError) as exc:
        current_app.logger.warning("Fetching %s news failed: %s", category, exc)
        raise BadGateway("Failed to fetch news.") from exc

    return jsonify(data)
