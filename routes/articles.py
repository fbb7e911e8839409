"""Article interactions blueprint: likes, bookmarks, shares and stats."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, jwt_required
from werkzeug.exceptions import BadRequest, NotFound

from models import db
from models.article import Article
from models.article_interaction import ArticleInteraction
from models.comment import Comment
from models.user import User
from schemas import LikeArticleRequest, SaveArticleRequest
from utils.request_validation import parse_request_model

articles_bp = Blueprint("articles", __name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _require_user() -> User:
    user = get_current_user()
    if user is None:
        raise NotFound("User not found.")
    return user


def _article_url(raw: str) -> str:
    url = (raw or "").strip()
    if not url:
        raise BadRequest("Article URL is required.")
    return url


def _positive_int(name: str, default: int, maximum: int | None = None) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise BadRequest(f"{name} must be an integer.") from exc
    if value < 1:
        raise BadRequest(f"{name} must be at least 1.")
    return min(value, maximum) if maximum else value


@articles_bp.route("/<path:article_url>/like", methods=["POST"])
@jwt_required()
def like_article(article_url: str):
    """Set the caller's like flag for an article."""

    user = _require_user()
    url = _article_url(article_url)
    body = parse_request_model(request, LikeArticleRequest)

    Article.get_or_create(url, body.title)
    interaction = ArticleInteraction.get_or_create(user.id, url)
    interaction.is_liked = body.is_liked
    db.session.commit()

    return jsonify(
        {
            "message": "Article liked." if interaction.is_liked else "Article unliked.",
            "isLiked": interaction.is_liked,
            "likeCount": ArticleInteraction.stats_for(url)["totalLikes"],
        }
    )


@articles_bp.route("/<path:article_url>/save", methods=["POST"])
@jwt_required()
def save_article(article_url: str):
    """Set the caller's bookmark flag for an article."""

    user = _require_user()
    url = _article_url(article_url)
    body = parse_request_model(request, SaveArticleRequest)

    Article.get_or_create(url, body.title)
    interaction = ArticleInteraction.get_or_create(user.id, url)
    interaction.set_bookmarked(body.is_saved)
    db.session.commit()

    return jsonify(
        {
            "message": "Article saved." if interaction.is_bookmarked else "Article unsaved.",
            "isSaved": interaction.is_bookmarked,
        }
    )


@articles_bp.route("/<path:article_url>/share", methods=["POST"])
@jwt_required(optional=True)
def share_article(article_url: str):
    """Count a share; only authenticated shares are stored."""

    url = _article_url(article_url)
    user = get_current_user()

    share_count = None
    if user is not None:
        Article.get_or_create(url)
        interaction = ArticleInteraction.get_or_create(user.id, url)
        interaction.share_count = (interaction.share_count or 0) + 1
        db.session.commit()
        share_count = interaction.share_count
    else:
        current_app.logger.info("Anonymous share of %s", url)

    return jsonify({"message": "Article shared.", "shareCount": share_count})


@articles_bp.route("/<path:article_url>/stats", methods=["GET"])
@jwt_required(optional=True)
def article_stats(article_url: str):
    """Totals across all readers, plus the caller's own flags when signed in."""

    url = _article_url(article_url)
    user = get_current_user()

    stats = ArticleInteraction.stats_for(url)
    stats["totalComments"] = Comment.query.filter_by(article_identifier=url).count()

    if user is not None:
        interaction = ArticleInteraction.query.filter_by(user_id=user.id, article_url=url).first()
        stats["userLiked"] = bool(interaction and interaction.is_liked)
        stats["userSaved"] = bool(interaction and interaction.is_bookmarked)

    return jsonify(stats)


@articles_bp.route("/saved", methods=["GET"])
@jwt_required()
def saved_articles():
    """The caller's bookmarks, most recently saved first."""

    user = _require_user()
    page = _positive_int("page", 1)
    limit = _positive_int("limit", DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)

    query = (
        db.session.query(ArticleInteraction, Article)
        .outerjoin(Article, Article.url == ArticleInteraction.article_url)
        .filter(
            ArticleInteraction.user_id == user.id,
            ArticleInteraction.is_bookmarked.is_(True),
        )
    )
    total = query.count()
    rows = (
        query.order_by(ArticleInteraction.saved_at.desc(), ArticleInteraction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    articles = [
        {
            "articleUrl": interaction.article_url,
            "title": article.title if article else "",
            "savedAt": interaction.saved_at.isoformat() if interaction.saved_at else None,
        }
        for interaction, article in rows
    ]
    return jsonify({"articles": articles, "page": page, "limit": limit, "total": total})
