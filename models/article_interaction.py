"""Per-user like, bookmark and share state for an article."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import case, func

from . import db


class ArticleInteraction(db.Model):
    """One row per (user, article URL)."""

    __tablename__ = "article_interactions"
    __table_args__ = (
        db.UniqueConstraint("user_id", "article_url", name="uq_interaction_user_article"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    article_url = db.Column(db.String(2048), nullable=False, index=True)
    is_liked = db.Column(db.Boolean, nullable=False, default=False)
    is_bookmarked = db.Column(db.Boolean, nullable=False, default=False)
    share_count = db.Column(db.Integer, nullable=False, default=0)
    saved_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", back_populates="interactions")

    @classmethod
    def get_or_create(cls, user_id: int, article_url: str) -> ArticleInteraction:
        interaction = cls.query.filter_by(user_id=user_id, article_url=article_url).first()
        if interaction is None:
            interaction = cls(
                user_id=user_id,
                article_url=article_url,
                is_liked=False,
                is_bookmarked=False,
                share_count=0,
            )
            db.session.add(interaction)
        return interaction

    def set_bookmarked(self, value: bool) -> None:
        """Set the bookmark flag; ``saved_at`` only moves when the flag turns on."""

        if value and not self.is_bookmarked:
            self.saved_at = datetime.utcnow()
        elif not value:
            self.saved_at = None
        self.is_bookmarked = value

    @classmethod
    def stats_for(cls, article_url: str) -> dict:
        """Aggregate likes, bookmarks and shares across all users."""

        likes, saves, shares = (
            db.session.query(
                func.coalesce(func.sum(case((cls.is_liked.is_(True), 1), else_=0)), 0),
                func.coalesce(
                    func.sum(case((cls.is_bookmarked.is_(True), 1), else_=0)), 0
                ),
                func.coalesce(func.sum(cls.share_count), 0),
            )
            .filter(cls.article_url == article_url)
            .one()
        )
        return {
            "totalLikes": int(likes or 0),
            "totalSaves": int(saves or 0),
            "totalShares": int(shares or 0),
        }
