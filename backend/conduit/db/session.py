from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.core.config import settings
from conduit.db import base  # noqa: F401  # ensure models are imported for metadata


def _is_memory_sqlite(url: str) -> bool:
    if not url.startswith("sqlite"):
        return False
    return ":memory:" in url or url.endswith("://")


def create_engine(database_url: str | None = None) -> AsyncEngine:
    url = database_url or settings.DATABASE_URL
    if _is_memory_sqlite(url):
        # Every pooled connection would otherwise get its own empty database
        return create_async_engine(url, echo=False, future=True, poolclass=StaticPool)
    return create_async_engine(url, echo=False, future=True, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


@asynccontextmanager
async def open_session(database_url: str | None = None) -> AsyncIterator[AsyncSession]:
    """Open a session on a private engine and dispose the engine on exit.

    The engine is released on every path out of the block, including errors.
    """
    engine = create_engine(database_url)
    try:
        async with create_sessionmaker(engine)() as session:
            yield session
    finally:
        await engine.dispose()


async def init_models(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
