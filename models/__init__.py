"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .pending_registration import PendingRegistration  # noqa: E402,F401
from .token_blocklist import TokenBlocklist  # noqa: E402,F401
from .article import Article  # noqa: E402,F401
from .article_interaction import ArticleInteraction  # noqa: E402,F401
from .comment import Comment, CommentLike  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "PendingRegistration",
    "TokenBlocklist",
    "Article",
    "ArticleInteraction",
    "Comment",
    "CommentLike",
]
