from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.models.tag import Tag


class TagNotFoundError(LookupError):
    """Raised when a referenced tag name does not exist."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(f"Tag(s) do not exist: {', '.join(self.names)}")


def _unique_names(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


async def get_tag_by_name(session: AsyncSession, name: str) -> Optional[Tag]:
    result = await session.exec(select(Tag).where(Tag.name == name))
    return result.one_or_none()


async def get_tags_by_name(session: AsyncSession, names: Iterable[str]) -> dict[str, Tag]:
    wanted = _unique_names(names)
    if not wanted:
        return {}
    result = await session.exec(select(Tag).where(Tag.name.in_(wanted)))
    return {tag.name: tag for tag in result.all()}


async def require_tags(session: AsyncSession, names: Iterable[str]) -> list[Tag]:
    """Resolve every name to an existing tag, preserving the requested order."""
    wanted = _unique_names(names)
    found = await get_tags_by_name(session, wanted)
    missing = [name for name in wanted if name not in found]
    if missing:
        raise TagNotFoundError(missing)
    return [found[name] for name in wanted]


async def ensure_tag(session: AsyncSession, name: str) -> Tag:
    existing = await get_tag_by_name(session, name)
    if existing:
        return existing
    tag = Tag(name=name)
    session.add(tag)
    await session.flush()
    return tag


async def ensure_tags(session: AsyncSession, names: Iterable[str]) -> list[Tag]:
    """Ensure a batch of tags exists with one lookup and one flush.

    Returns the tags in the order requested, duplicates dropped.
    """
    wanted = _unique_names(names)
    found = await get_tags_by_name(session, wanted)
    created = False
    for name in wanted:
        if name not in found:
            tag = Tag(name=name)
            session.add(tag)
            found[name] = tag
            created = True
    if created:
        await session.flush()
    return [found[name] for name in wanted]
