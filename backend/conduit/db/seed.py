"""Load the Conduit sample dataset.

Usage:
    python -m conduit.db.seed
    conduit-seed

Users, tags and articles are only inserted when their unique key is not taken
yet, so re-running is safe for them. Comments are appended on every run unless
SEED_APPEND_COMMENTS is turned off. Each step is committed on its own: a
failure aborts the run but keeps whatever was written before it.

SEED_RUN_MIGRATIONS=true reads backend/alembic.ini and backend/alembic/ from
the source tree. Those files are not installed with the package, so use a
checkout or an editable install (pip install -e .) when enabling it.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field

from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.core.config import Settings, settings as default_settings
from conduit.db.init_db import run_migrations
from conduit.db.session import open_session
from conduit.fixtures import DEFAULT_FIXTURES, Fixtures
from conduit.services import articles as articles_service
from conduit.services import comments as comments_service
from conduit.services import tags as tags_service
from conduit.services import users as users_service

logger = logging.getLogger(__name__)


@dataclass
class SeedSummary:
    users: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    articles: list[str] = field(default_factory=list)
    comments: int = 0
    follows: int = 0
    favorites: int = 0


async def _seed_users(session: AsyncSession, fixtures: Fixtures, summary: SeedSummary, rounds: int | None) -> None:
    for fixture in fixtures.users:
        user = await users_service.ensure_user(
            session,
            username=fixture.username,
            email=fixture.email,
            password=fixture.password,
            bio=fixture.bio,
            image=fixture.image,
            rounds=rounds,
        )
        await session.commit()
        summary.users.append(user.username)
    logger.info("Created users: %s", ", ".join(summary.users))


async def _seed_tags(session: AsyncSession, fixtures: Fixtures, summary: SeedSummary) -> None:
    # Articles reference these, so the batch is committed before moving on
    tags = await tags_service.ensure_tags(session, fixtures.tags)
    await session.commit()
    summary.tags.extend(tag.name for tag in tags)
    logger.info("Created %s tags", len(tags))


async def _seed_articles(
    session: AsyncSession,
    fixtures: Fixtures,
    summary: SeedSummary,
    refresh_tags: bool,
) -> None:
    for fixture in fixtures.articles:
        article = await articles_service.ensure_article(
            session,
            slug=fixture.slug,
            title=fixture.title,
            description=fixture.description,
            body=fixture.body,
            author_username=fixture.author_username,
            tag_names=fixture.tag_names,
            refresh_tags=refresh_tags,
        )
        await session.commit()
        summary.articles.append(article.title)
    logger.info("Created articles: %s", ", ".join(summary.articles))


async def _seed_comments(session: AsyncSession, fixtures: Fixtures, summary: SeedSummary, append: bool) -> None:
    for fixture in fixtures.comments:
        await comments_service.add_comment(
            session,
            body=fixture.body,
            author_username=fixture.author_username,
            article_slug=fixture.article_slug,
            append=append,
        )
        await session.commit()
        summary.comments += 1
    logger.info("Created %s comments", summary.comments)


async def _seed_relations(session: AsyncSession, fixtures: Fixtures, summary: SeedSummary) -> None:
    for follower, followee in fixtures.follows:
        await users_service.connect_follow(session, follower_username=follower, followee_username=followee)
        await session.commit()
        summary.follows += 1

    for username, slugs in fixtures.favorites:
        for slug in slugs:
            await articles_service.connect_favorite(session, username=username, slug=slug)
            await session.commit()
            summary.favorites += 1
    logger.info("Connected %s follows and %s favorites", summary.follows, summary.favorites)


async def load_fixtures(
    session: AsyncSession,
    fixtures: Fixtures = DEFAULT_FIXTURES,
    *,
    append_comments: bool = True,
    refresh_article_tags: bool = False,
    password_rounds: int | None = None,
) -> SeedSummary:
    """Write ``fixtures`` through ``session`` stage by stage.

    Any error propagates to the caller as-is; stages that already committed
    are not undone.
    """
    summary = SeedSummary()
    await _seed_users(session, fixtures, summary, password_rounds)
    await _seed_tags(session, fixtures, summary)
    await _seed_articles(session, fixtures, summary, refresh_article_tags)
    await _seed_comments(session, fixtures, summary, append_comments)
    await _seed_relations(session, fixtures, summary)
    return summary


async def seed_database(config: Settings | None = None, fixtures: Fixtures = DEFAULT_FIXTURES) -> SeedSummary:
    config = config or default_settings
    logger.info("Start seeding...")
    if config.SEED_RUN_MIGRATIONS:
        await asyncio.to_thread(run_migrations, config.DATABASE_URL)

    async with open_session(config.DATABASE_URL) as session:
        summary = await load_fixtures(
            session,
            fixtures,
            append_comments=config.SEED_APPEND_COMMENTS,
            refresh_article_tags=config.SEED_REFRESH_ARTICLE_TAGS,
            password_rounds=config.PASSWORD_HASH_ROUNDS,
        )
    logger.info("Seeding completed successfully!")
    return summary


def main() -> None:
    logging.basicConfig(
        level=default_settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    try:
        asyncio.run(seed_database())
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
