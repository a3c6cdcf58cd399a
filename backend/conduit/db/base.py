"""Import all models for Alembic or metadata creation."""

from conduit.models.article import Article, ArticleFavorite, ArticleTag
from conduit.models.comment import Comment
from conduit.models.tag import Tag
from conduit.models.user import User, UserFollow

__all__ = [
    "User",
    "UserFollow",
    "Tag",
    "Article",
    "ArticleTag",
    "ArticleFavorite",
    "Comment",
]
