"""Application factory."""

import logging
import os
import uuid

from flask import Flask, current_app, g, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import jwt, limiter, mailer, migrate
from models import db
from routes.articles import articles_bp
from routes.auth import auth_bp
from routes.comments import comments_bp
from routes.news import news_bp
from routes.users import users_bp
from utils.responses import error_response
from utils.tokens import register_jwt_callbacks


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Article URLs travel in the path, so "https://" must survive routing.
    app.url_map.merge_slashes = False

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_callbacks(jwt)
    mailer.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    if not app.config.get("RATELIMIT_KEY_PREFIX"):
        app.config["RATELIMIT_KEY_PREFIX"] = str(uuid.uuid4())
    limiter.init_app(app)

    # Ensure uploads directory exists
    upload_dir = app.config.get("UPLOAD_DIR")
    if upload_dir:
        os.makedirs(upload_dir, exist_ok=True)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(comments_bp, url_prefix="/api")
    app.register_blueprint(articles_bp, url_prefix="/api/articles")
    app.register_blueprint(news_bp, url_prefix="/api/news")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    @app.route("/api", methods=["GET"])
    def api_root():
        return jsonify({"status": "ok", "message": "News API is running."})

    @app.route("/uploads/<path:filename>", methods=["GET"])
    def uploaded_file(filename: str):
        return send_from_directory(current_app.config["UPLOAD_DIR"], filename)

    # Errors
    _register_error_handlers(app)

    return app


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        response, status = error_response(
            error.code or 500,
            error.description or "",
            getattr(error, "name", "Error"),
        )
        for key, value in error.get_response().headers.items():
            if key.lower() not in {"content-type", "content-length"}:
                response.headers.setdefault(key, value)
        return response, status

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        db.session.rollback()
        app.logger.exception("Unhandled application error", exc_info=error)
        return error_response(500, "An unexpected error occurred.", "Internal Server Error")


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
