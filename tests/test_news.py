"""Tests for the news category proxy."""

from __future__ import annotations

import requests

import routes.news as news_routes


def test_invalid_category(client):
    response = client.get("/api/news/gossip")

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid news category."


def test_category_passthrough(client, monkeypatch):
    calls = []

    def _fetch(category):
        calls.append(category)
        return {"data": [{"title": "Headline", "link": "https://news.example.com/a"}]}

    monkeypatch.setattr(news_routes, "fetch_category", _fetch)

    response = client.get("/api/news/teknologi")

    assert response.status_code == 200
    assert response.get_json()["data"][0]["title"] == "Headline"
    assert calls == ["teknologi"]


def test_upstream_failure_maps_to_bad_gateway(client, monkeypatch):
    def _fetch(category):
        raise requests.ConnectionError("upstream down")

    monkeypatch.setattr(news_routes, "fetch_category", _fetch)

    response = client.get("/api/news/terbaru")

    assert response.status_code == 502
    assert response.get_json()["message"] == "Failed to fetch news."


def test_fetch_category_uses_configured_base_url(app, monkeypatch):
    captured = {}

    class _Response:
        def raise_for_status(self):
            return None

        def json(self):
            return {"data": []}

    def _get(url, timeout):
        captured["url"] = url
        captured["timeout"] = timeout
        return _Response()

    monkeypatch.setattr(news_routes.requests, "get", _get)
    app.config["NEWS_API_BASE_URL"] = "https://upstream.example.com/api/"

    with app.app_context():
        assert news_routes.fetch_category("ekonomi") == {"data": []}

    assert captured["url"] == "https://upstream.example.com/api/ekonomi"
