from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.models.article import Article, ArticleFavorite, ArticleTag
from conduit.models.tag import Tag
from conduit.services import tags as tags_service
from conduit.services import users as users_service


class ArticleNotFoundError(LookupError):
    """Raised when a referenced slug does not exist."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Article '{slug}' does not exist")


async def get_article_by_slug(session: AsyncSession, slug: str) -> Optional[Article]:
    result = await session.exec(select(Article).where(Article.slug == slug))
    return result.one_or_none()


async def require_article(session: AsyncSession, slug: str) -> Article:
    article = await get_article_by_slug(session, slug)
    if article is None:
        raise ArticleNotFoundError(slug)
    return article


async def list_article_tags(session: AsyncSession, article_id: int) -> list[Tag]:
    stmt = (
        select(Tag)
        .join(ArticleTag, ArticleTag.tag_id == Tag.id)
        .where(ArticleTag.article_id == article_id)
        .order_by(Tag.name.asc())
    )
    result = await session.exec(stmt)
    return list(result.all())


async def _replace_tag_links(session: AsyncSession, article: Article, tags: Sequence[Tag]) -> None:
    await session.exec(delete(ArticleTag).where(ArticleTag.article_id == article.id))
    for tag in tags:
        session.add(ArticleTag(article_id=article.id, tag_id=tag.id))


async def ensure_article(
    session: AsyncSession,
    *,
    slug: str,
    title: str,
    description: str,
    body: str,
    author_username: str,
    tag_names: Sequence[str] = (),
    refresh_tags: bool = False,
) -> Article:
    """Insert the article unless one with this slug already exists.

    An existing article is left as it is. Its tag links are only rewritten
    when ``refresh_tags`` is set, otherwise ``tag_names`` is ignored for it.
    """
    existing = await get_article_by_slug(session, slug)
    if existing:
        if refresh_tags:
            tags = await tags_service.require_tags(session, tag_names)
            await _replace_tag_links(session, existing, tags)
            await session.flush()
        return existing

    author = await users_service.require_user(session, author_username)
    tags = await tags_service.require_tags(session, tag_names)

    article = Article(
        slug=slug,
        title=title,
        description=description,
        body=body,
        author_id=author.id,
    )
    session.add(article)
    await session.flush()

    for tag in tags:
        session.add(ArticleTag(article_id=article.id, tag_id=tag.id))
    await session.flush()
    return article


async def list_favorites(session: AsyncSession, user_id: int) -> list[Article]:
    stmt = (
        select(Article)
        .join(ArticleFavorite, ArticleFavorite.article_id == Article.id)
        .where(ArticleFavorite.user_id == user_id)
        .order_by(Article.slug.asc())
    )
    result = await session.exec(stmt)
    return list(result.all())


async def connect_favorite(
    session: AsyncSession,
    *,
    username: str,
    slug: str,
) -> ArticleFavorite:
    """Add ``slug`` to the user's favorites; no-op when already favorited."""
    user = await users_service.require_user(session, username)
    article = await require_article(session, slug)

    stmt = select(ArticleFavorite).where(
        ArticleFavorite.user_id == user.id,
        ArticleFavorite.article_id == article.id,
    )
    result = await session.exec(stmt)
    favorite = result.one_or_none()
    if favorite:
        return favorite

    favorite = ArticleFavorite(user_id=user.id, article_id=article.id)
    session.add(favorite)
    await session.flush()
    return favorite
