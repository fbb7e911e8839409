"""Comments blueprint: threaded comments, replies and comment likes."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, jwt_required
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models import db
from models.article import Article
from models.comment import Comment, liked_comment_ids
from models.user import User
from schemas import CommentRequest
from utils.request_validation import parse_request_model

comments_bp = Blueprint("comments", __name__)


def _require_user() -> User:
    user = get_current_user()
    if user is None:
        raise NotFound("User not found.")
    return user


def _article_identifier(raw: str) -> str:
    identifier = (raw or "").strip()
    if not identifier:
        raise BadRequest("Article identifier is required.")
    return identifier


def _get_comment_or_404(comment_id: int) -> Comment:
    comment = db.session.get(Comment, comment_id)
    if comment is None:
        raise NotFound("Comment not found.")
    return comment


def _require_owner(comment: Comment, user: User, action: str) -> None:
    if comment.user_id != user.id:
        raise Forbidden(f"You are not allowed to {action} this comment.")


@comments_bp.route("/articles/<path:article_identifier>/comments", methods=["GET"])
@jwt_required(optional=True)
def list_comments(article_identifier: str):
    """Top-level comments newest first, each with replies oldest first."""

    identifier = _article_identifier(article_identifier)
    user = get_current_user()
    liked = liked_comment_ids(user.id, identifier) if user is not None else set()

    comments = Comment.top_level_for(identifier)
    return jsonify([comment.to_dict(liked, include_replies=True) for comment in comments])


@comments_bp.route("/articles/<path:article_identifier>/comments", methods=["POST"])
@jwt_required()
def post_comment(article_identifier: str):
    """Create a top-level comment on an article."""

    user = _require_user()
    identifier = _article_identifier(article_identifier)
    body = parse_request_model(request, CommentRequest)

    Article.get_or_create(identifier)
    comment = Comment.create(identifier, body.text, user)
    db.session.commit()
    current_app.logger.info("Comment %s posted by user %s", comment.id, user.id)

    return jsonify(comment.to_dict(include_replies=True)), HTTPStatus.CREATED


@comments_bp.route("/comments/<int:comment_id>/replies", methods=["GET"])
@jwt_required(optional=True)
def list_replies(comment_id: int):
    """Direct replies to a comment, oldest first."""

    parent = _get_comment_or_404(comment_id)
    user = get_current_user()
    liked = liked_comment_ids(user.id, parent.article_identifier) if user is not None else set()

    return jsonify([reply.to_dict(liked) for reply in parent.replies])


@comments_bp.route("/comments/<int:comment_id>/replies", methods=["POST"])
@jwt_required()
def post_reply(comment_id: int):
    """Reply to a comment; the reply inherits the parent's article."""

    user = _require_user()
    body = parse_request_model(request, CommentRequest)
    parent = _get_comment_or_404(comment_id)

    reply = Comment.create(parent.article_identifier, body.text, user, parent=parent)
    db.session.commit()

    return jsonify(reply.to_dict(include_replies=True)), HTTPStatus.CREATED


@comments_bp.route("/comments/<int:comment_id>/like", methods=["POST"])
@jwt_required()
def toggle_comment_like(comment_id: int):
    """Like the comment, or unlike it if the caller already does."""

    user = _require_user()
    comment = _get_comment_or_404(comment_id)

    is_liked = comment.toggle_like(user.id)
    db.session.commit()

    return jsonify(
        {
            "message": "Comment liked." if is_liked else "Comment unliked.",
            "isLiked": is_liked,
            "likeCount": comment.like_count,
        }
    )


@comments_bp.route("/comments/<int:comment_id>", methods=["PUT"])
@jwt_required()
def update_comment(comment_id: int):
    """Edit the text of one's own comment."""

    user = _require_user()
    comment = _get_comment_or_404(comment_id)
    _require_owner(comment, user, "edit")
    body = parse_request_model(request, CommentRequest)

    comment.text = body.text
    db.session.commit()

    return jsonify(
        {
            "message": "Comment updated.",
            "comment": comment.to_dict(liked_comment_ids(user.id, comment.article_identifier)),
        }
    )


@comments_bp.route("/comments/<int:comment_id>", methods=["DELETE"])
@jwt_required()
def delete_comment(comment_id: int):
    """Delete one's own comment together with every reply beneath it."""

    user = _require_user()
    comment = _get_comment_or_404(comment_id)
    _require_owner(comment, user, "delete")

    removed = comment.delete_thread()
    db.session.commit()
    current_app.logger.info("Comment %s deleted with %s rows", comment_id, removed)

    return jsonify({"message": "Comment deleted.", "deleted": removed})
