from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(
        sa_column=Column(String(length=255), nullable=False, unique=True, index=True),
    )
    email: str = Field(
        sa_column=Column(String(length=255), nullable=False, unique=True, index=True),
    )
    hashed_password: str
    bio: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    image: Optional[str] = Field(default=None, sa_column=Column(String(length=2048), nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class UserFollow(SQLModel, table=True):
    """Directed follow edge: ``follower_id`` follows ``following_id``."""

    __tablename__ = "user_follows"

    follower_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )
    following_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
