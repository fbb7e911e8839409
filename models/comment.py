"""Threaded comments and comment likes."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy import case

from . import db


def _decremented(column):
    """SQL expression lowering a counter column without going below zero."""

    return case((column > 0, column - 1), else_=0)


class CommentLike(db.Model):
    """Membership of a user in a comment's liker set."""

    __tablename__ = "comment_likes"
    __table_args__ = (
        db.UniqueConstraint("comment_id", "user_id", name="uq_comment_like_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    comment_id = db.Column(
        db.Integer,
        db.ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    comment = db.relationship("Comment", back_populates="likes")
    user = db.relationship("User", back_populates="comment_likes")


class Comment(db.Model):
    """A comment on an article, or a reply when ``parent_id`` is set."""

    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    article_identifier = db.Column(db.String(2048), nullable=False, index=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author = db.Column(db.String(255), nullable=False)
    author_photo = db.Column(db.String(512), nullable=True)
    text = db.Column(db.Text, nullable=False)
    parent_id = db.Column(
        db.Integer,
        db.ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    reply_count = db.Column(db.Integer, nullable=False, default=0)
    like_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", back_populates="comments")
    parent = db.relationship("Comment", remote_side=[id], back_populates="replies")
    replies = db.relationship(
        "Comment",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by=lambda: [Comment.created_at, Comment.id],
    )
    likes = db.relationship(
        "CommentLike",
        back_populates="comment",
        cascade="all, delete-orphan",
    )

    @classmethod
    def create(cls, article_identifier: str, text: str, user, parent: Comment | None = None) -> Comment:
        """Add a comment (or a reply to ``parent``) to the session."""

        comment = cls(
            article_identifier=parent.article_identifier if parent else article_identifier,
            user_id=user.id,
            author=user.public_name,
            author_photo=user.photo_url,
            text=text,
            parent_id=parent.id if parent else None,
            like_count=0,
            reply_count=0,
        )
        if parent is not None:
            parent.reply_count = Comment.reply_count + 1
        db.session.add(comment)
        return comment

    @classmethod
    def top_level_for(cls, article_identifier: str) -> list[Comment]:
        return (
            cls.query.filter_by(article_identifier=article_identifier, parent_id=None)
            .order_by(cls.created_at.desc(), cls.id.desc())
            .all()
        )

    def toggle_like(self, user_id: int) -> bool:
        """Add or remove ``user_id`` from the liker set; return the new state."""

        existing = CommentLike.query.filter_by(comment_id=self.id, user_id=user_id).first()
        if existing is not None:
            self.likes.remove(existing)
            self.like_count = _decremented(Comment.like_count)
            return False

        self.likes.append(CommentLike(user_id=user_id))
        self.like_count = Comment.like_count + 1
        return True

    def subtree_size(self) -> int:
        """Number of comments removed by deleting this one."""

        return 1 + sum(reply.subtree_size() for reply in self.replies)

    def delete_thread(self) -> int:
        """Delete this comment with all nested replies; the caller commits.

        Returns the number of comment rows removed.
        """

        removed = self.subtree_size()
        if self.parent is not None:
            self.parent.reply_count = _decremented(Comment.reply_count)
        db.session.delete(self)
        return removed

    def to_dict(self, liked_ids: Iterable[int] | None = None, include_replies: bool = False) -> dict:
        """Serialize the comment; ``liked_ids`` are the caller's liked comment ids."""

        liked = set(liked_ids or ())
        data = {
            "id": self.id,
            "articleIdentifier": self.article_identifier,
            "user": self.user_id,
            "author": self.author,
            "authorPhoto": self.author_photo,
            "text": self.text,
            "parentId": self.parent_id,
            "likeCount": self.like_count,
            "replyCount": self.reply_count,
            "isLiked": self.id in liked,
            "timestamp": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_replies:
            data["replies"] = [
                reply.to_dict(liked, include_replies=True) for reply in self.replies
            ]
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Comment id={self.id} parent_id={self.parent_id}>"


def liked_comment_ids(user_id: int, article_identifier: str | None = None) -> set[int]:
    """Return ids of comments the user likes, optionally within one article."""

    query = db.session.query(CommentLike.comment_id).filter(CommentLike.user_id == user_id)
    if article_identifier is not None:
        query = query.join(Comment, Comment.id == CommentLike.comment_id).filter(
            Comment.article_identifier == article_identifier
        )
    return {row.comment_id for row in query}


def purge_user_activity(user_id: int) -> None:
    """Remove a user's comment threads and likes while keeping counters right."""

    for like in CommentLike.query.filter_by(user_id=user_id).all():
        comment = like.comment
        comment.likes.remove(like)
        comment.like_count = _decremented(Comment.like_count)
    db.session.flush()

    comment_ids = [
        row.id
        for row in db.session.query(Comment.id)
        .filter(Comment.user_id == user_id)
        .order_by(Comment.parent_id.isnot(None), Comment.id)
    ]
    for comment_id in comment_ids:
        comment = db.session.get(Comment, comment_id)
        if comment is None:
            continue
        comment.delete_thread()
        db.session.flush()


def refresh_author(user) -> None:
    """Copy the user's current name and photo onto their comments."""

    Comment.query.filter_by(user_id=user.id).update(
        {"author": user.public_name, "author_photo": user.photo_url},
        synchronize_session=False,
    )
