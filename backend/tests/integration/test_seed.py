"""
Integration tests for the fixture loader.

Runs the full sample dataset through a real session and checks the
resulting rows, including behaviour on repeated runs and on failure.
"""

import asyncio
import dataclasses
import logging

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.core.config import Settings
from conduit.db import seed as seed_module
from conduit.db.init_db import run_migrations
from conduit.db.seed import load_fixtures, seed_database
from conduit.db.session import open_session
from conduit.fixtures import DEFAULT_FIXTURES, ArticleFixture, CommentFixture
from conduit.models.article import Article
from conduit.models.comment import Comment
from conduit.models.tag import Tag
from conduit.models.user import User
from conduit.services import articles as article_service
from conduit.services import users as user_service

FAST_ROUNDS = 4


async def _count(session: AsyncSession, model) -> int:
    result = await session.exec(select(model))
    return len(result.all())


async def _load(session: AsyncSession, fixtures=DEFAULT_FIXTURES, **kwargs):
    return await load_fixtures(session, fixtures, password_rounds=FAST_ROUNDS, **kwargs)


@pytest.mark.integration
async def test_first_run_populates_dataset(session: AsyncSession):
    summary = await _load(session)

    assert summary.users == ["johndoe", "janedoe"]
    assert summary.tags == ["javascript", "typescript", "aws", "web-security", "waf"]
    assert summary.articles == [
        "Introduction to AWS WAF",
        "Implementing AWS WAF with CloudFront",
        "TypeScript Best Practices",
    ]
    assert summary.comments == 3
    assert summary.follows == 1
    assert summary.favorites == 3

    assert await _count(session, User) == 2
    assert await _count(session, Tag) == 5
    assert await _count(session, Article) == 3
    assert await _count(session, Comment) == 3


@pytest.mark.integration
async def test_second_run_duplicates_only_comments(session: AsyncSession):
    await _load(session)
    await _load(session)

    assert await _count(session, User) == 2
    assert await _count(session, Tag) == 5
    assert await _count(session, Article) == 3
    assert await _count(session, Comment) == 6

    jane = await user_service.get_user_by_username(session, "janedoe")
    assert len(await user_service.list_following(session, jane.id)) == 1
    assert len(await article_service.list_favorites(session, jane.id)) == 2


@pytest.mark.integration
async def test_second_run_without_append_keeps_comments(session: AsyncSession):
    await _load(session, append_comments=False)
    await _load(session, append_comments=False)

    assert await _count(session, Comment) == 3


@pytest.mark.integration
async def test_follow_edge_is_directed(session: AsyncSession):
    await _load(session)

    jane = await user_service.get_user_by_username(session, "janedoe")
    john = await user_service.get_user_by_username(session, "johndoe")
    assert await user_service.is_following(session, jane.id, john.id) is True
    assert await user_service.is_following(session, john.id, jane.id) is False


@pytest.mark.integration
async def test_favorite_counts(session: AsyncSession):
    await _load(session)

    jane = await user_service.get_user_by_username(session, "janedoe")
    john = await user_service.get_user_by_username(session, "johndoe")
    jane_favorites = await article_service.list_favorites(session, jane.id)
    john_favorites = await article_service.list_favorites(session, john.id)

    assert sorted(article.slug for article in jane_favorites) == [
        "implementing-aws-waf-with-cloudfront",
        "introduction-to-aws-waf",
    ]
    assert [article.slug for article in john_favorites] == ["typescript-best-practices"]


@pytest.mark.integration
async def test_article_tags_and_authors(session: AsyncSession):
    await _load(session)

    article = await article_service.get_article_by_slug(session, "typescript-best-practices")
    jane = await user_service.get_user_by_username(session, "janedoe")
    assert article.author_id == jane.id
    tags = await article_service.list_article_tags(session, article.id)
    assert [tag.name for tag in tags] == ["javascript", "typescript"]


@pytest.mark.integration
async def test_rerun_with_changed_tags_keeps_existing_links(session: AsyncSession):
    """A second run with a different tag list leaves existing articles' links alone."""
    await _load(session)

    retagged = dataclasses.replace(
        DEFAULT_FIXTURES,
        articles=tuple(
            dataclasses.replace(article, tag_names=("javascript",)) for article in DEFAULT_FIXTURES.articles
        ),
    )
    await _load(session, retagged)

    article = await article_service.get_article_by_slug(session, "introduction-to-aws-waf")
    tags = await article_service.list_article_tags(session, article.id)
    assert [tag.name for tag in tags] == ["aws", "waf", "web-security"]


@pytest.mark.integration
async def test_rerun_with_refresh_rewrites_links(session: AsyncSession):
    await _load(session)

    retagged = dataclasses.replace(
        DEFAULT_FIXTURES,
        articles=tuple(
            dataclasses.replace(article, tag_names=("javascript",)) for article in DEFAULT_FIXTURES.articles
        ),
    )
    await _load(session, retagged, refresh_article_tags=True)

    article = await article_service.get_article_by_slug(session, "introduction-to-aws-waf")
    tags = await article_service.list_article_tags(session, article.id)
    assert [tag.name for tag in tags] == ["javascript"]


@pytest.mark.integration
async def test_missing_article_aborts_without_rollback(session: AsyncSession):
    """A failing comment stops the run but committed rows stay."""
    broken = dataclasses.replace(
        DEFAULT_FIXTURES,
        comments=DEFAULT_FIXTURES.comments[:1]
        + (CommentFixture(body="Lost", author_username="janedoe", article_slug="no-such-article"),)
        + DEFAULT_FIXTURES.comments[1:],
    )

    with pytest.raises(article_service.ArticleNotFoundError):
        await _load(session, broken)
    await session.rollback()

    assert await _count(session, User) == 2
    assert await _count(session, Tag) == 5
    assert await _count(session, Article) == 3
    # The comment before the failing one was already committed
    assert await _count(session, Comment) == 1

    jane = await user_service.get_user_by_username(session, "janedoe")
    # Relation stage never ran
    assert await user_service.list_following(session, jane.id) == []


@pytest.mark.integration
async def test_missing_author_aborts_article_stage(session: AsyncSession):
    broken = dataclasses.replace(
        DEFAULT_FIXTURES,
        articles=DEFAULT_FIXTURES.articles
        + (
            ArticleFixture(
                slug="ghost-post",
                title="Ghost",
                description="Nobody wrote this",
                body="Boo",
                author_username="ghost",
            ),
        ),
    )

    with pytest.raises(user_service.UserNotFoundError):
        await _load(session, broken)
    await session.rollback()

    assert await _count(session, Article) == 3
    assert await _count(session, Comment) == 0


@pytest.mark.integration
async def test_seed_database_runs_migrations_on_file_database(tmp_path):
    """End to end: migrate a file database, seed it twice, inspect the result."""
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'conduit.db'}"
    config = Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        PASSWORD_HASH_ROUNDS=FAST_ROUNDS,
        SEED_RUN_MIGRATIONS=True,
    )

    await seed_database(config)
    summary = await seed_database(config)
    assert summary.users == ["johndoe", "janedoe"]

    async with open_session(database_url) as session:
        assert await _count(session, User) == 2
        assert await _count(session, Article) == 3
        assert await _count(session, Comment) == 6


@pytest.mark.integration
def test_main_exits_non_zero_on_failure(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture):
    async def failing_seed(*args, **kwargs):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(seed_module, "seed_database", failing_seed)

    with caplog.at_level(logging.ERROR, logger="conduit.db.seed"):
        with pytest.raises(SystemExit) as exc_info:
            seed_module.main()

    assert exc_info.value.code == 1
    assert "Seeding failed" in caplog.text
    assert "connection refused" in caplog.text


@pytest.mark.integration
def test_main_returns_normally_on_success(monkeypatch: pytest.MonkeyPatch):
    calls = []

    async def fake_seed(*args, **kwargs):
        calls.append(True)

    monkeypatch.setattr(seed_module, "seed_database", fake_seed)

    seed_module.main()
    assert calls == [True]


@pytest.mark.integration
async def test_favorite_failure_keeps_earlier_favorites(session: AsyncSession):
    """Each favorite is committed on its own, so a bad slug later in the list keeps the earlier ones."""
    broken = dataclasses.replace(
        DEFAULT_FIXTURES,
        favorites=(("janedoe", ("introduction-to-aws-waf", "no-such-article")),),
    )

    with pytest.raises(article_service.ArticleNotFoundError):
        await _load(session, broken)
    await session.rollback()

    jane = await user_service.get_user_by_username(session, "janedoe")
    favorites = await article_service.list_favorites(session, jane.id)
    assert [article.slug for article in favorites] == ["introduction-to-aws-waf"]


def _track_engine_disposal(monkeypatch: pytest.MonkeyPatch) -> list[AsyncEngine]:
    disposed: list[AsyncEngine] = []
    original_dispose = AsyncEngine.dispose

    async def tracking_dispose(self, *args, **kwargs):
        disposed.append(self)
        await original_dispose(self, *args, **kwargs)

    monkeypatch.setattr(AsyncEngine, "dispose", tracking_dispose)
    return disposed


@pytest.mark.integration
async def test_open_session_disposes_engine_when_body_raises(monkeypatch: pytest.MonkeyPatch):
    disposed = _track_engine_disposal(monkeypatch)

    with pytest.raises(RuntimeError, match="boom"):
        async with open_session("sqlite+aiosqlite:///:memory:"):
            raise RuntimeError("boom")

    assert len(disposed) == 1


@pytest.mark.integration
async def test_seed_database_disposes_engine_on_success_and_failure(tmp_path, monkeypatch: pytest.MonkeyPatch):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'conduit.db'}"
    await asyncio.to_thread(run_migrations, database_url)
    config = Settings(_env_file=None, DATABASE_URL=database_url, PASSWORD_HASH_ROUNDS=FAST_ROUNDS)
    disposed = _track_engine_disposal(monkeypatch)

    await seed_database(config)
    assert len(disposed) == 1

    broken = dataclasses.replace(
        DEFAULT_FIXTURES,
        comments=(CommentFixture(body="Lost", author_username="janedoe", article_slug="no-such-article"),),
    )
    with pytest.raises(article_service.ArticleNotFoundError):
        await seed_database(config, broken)
    assert len(disposed) == 2
