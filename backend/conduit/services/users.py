from __future__ import annotations

import asyncio
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conduit.core.security import get_password_hash
from conduit.models.user import User, UserFollow


class UserNotFoundError(LookupError):
    """Raised when a referenced username does not exist."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' does not exist")


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.exec(select(User).where(User.username == username))
    return result.one_or_none()


async def require_user(session: AsyncSession, username: str) -> User:
    user = await get_user_by_username(session, username)
    if user is None:
        raise UserNotFoundError(username)
    return user


async def ensure_user(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    password: str,
    bio: str | None = None,
    image: str | None = None,
    rounds: int | None = None,
) -> User:
    """Insert the user unless one with this username already exists.

    An existing row is returned untouched, including its password hash.
    """
    existing = await get_user_by_username(session, username)
    if existing:
        return existing

    # bcrypt is deliberately slow; keep it off the event loop
    hashed_password = await asyncio.to_thread(get_password_hash, password, rounds)
    user = User(
        username=username,
        email=email,
        hashed_password=hashed_password,
        bio=bio,
        image=image,
    )
    session.add(user)
    await session.flush()
    return user


async def is_following(session: AsyncSession, follower_id: int, following_id: int) -> bool:
    stmt = select(UserFollow).where(
        UserFollow.follower_id == follower_id,
        UserFollow.following_id == following_id,
    )
    result = await session.exec(stmt)
    return result.one_or_none() is not None


async def list_following(session: AsyncSession, user_id: int) -> list[User]:
    stmt = (
        select(User)
        .join(UserFollow, UserFollow.following_id == User.id)
        .where(UserFollow.follower_id == user_id)
        .order_by(User.username.asc())
    )
    result = await session.exec(stmt)
    return list(result.all())


async def connect_follow(
    session: AsyncSession,
    *,
    follower_username: str,
    followee_username: str,
) -> UserFollow:
    """Make ``follower_username`` follow ``followee_username``; no-op when already following."""
    follower = await require_user(session, follower_username)
    followee = await require_user(session, followee_username)

    stmt = select(UserFollow).where(
        UserFollow.follower_id == follower.id,
        UserFollow.following_id == followee.id,
    )
    result = await session.exec(stmt)
    edge = result.one_or_none()
    if edge:
        return edge

    edge = UserFollow(follower_id=follower.id, following_id=followee.id)
    session.add(edge)
    await session.flush()
    return edge
