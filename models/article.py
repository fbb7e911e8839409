"""Cached article metadata."""

from __future__ import annotations

from datetime import datetime

from . import db


class Article(db.Model):
    """An article the app has seen, keyed by its URL."""

    __tablename__ = "articles"

    id = db.Column(db.Integer, primary_key=True)
    url = db.Column(db.String(2048), unique=True, nullable=False)
    title = db.Column(db.String(512), nullable=False, default="")
    content = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @classmethod
    def get_or_create(cls, url: str, title: str | None = None) -> Article:
        """Return the cached article for ``url``, adding it to the session if new."""

        article = cls.query.filter_by(url=url).first()
        if article is None:
            article = cls(url=url, title=title or "", content="")
            db.session.add(article)
        elif title and not article.title:
            article.title = title
        return article
