from __future__ import annotations

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.models.comment import Comment
from conduit.services import articles as articles_service
from conduit.services import users as users_service


async def list_comments_for_article(session: AsyncSession, article_id: int) -> list[Comment]:
    stmt = (
        select(Comment)
        .where(Comment.article_id == article_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    result = await session.exec(stmt)
    return list(result.all())


async def add_comment(
    session: AsyncSession,
    *,
    body: str,
    author_username: str,
    article_slug: str,
    append: bool = True,
) -> Comment:
    """Insert a comment by ``author_username`` on ``article_slug``.

    Comments carry no natural key, so every call appends a new row. With
    ``append=False`` an identical existing comment is returned instead.
    """
    author = await users_service.require_user(session, author_username)
    article = await articles_service.require_article(session, article_slug)

    if not append:
        stmt = (
            select(Comment)
            .where(
                Comment.body == body,
                Comment.author_id == author.id,
                Comment.article_id == article.id,
            )
            .order_by(Comment.id.asc())
        )
        result = await session.exec(stmt)
        existing = result.first()
        if existing:
            return existing

    comment = Comment(body=body, author_id=author.id, article_id=article.id)
    session.add(comment)
    await session.flush()
    return comment
