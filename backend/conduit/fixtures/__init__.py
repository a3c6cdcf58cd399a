"""
Sample dataset loaded by the seeder.

Re-exports the fixture types and the default dataset:
    from conduit.fixtures import DEFAULT_FIXTURES, Fixtures
"""

from conduit.fixtures.data import (
    DEFAULT_FIXTURES,
    ArticleFixture,
    CommentFixture,
    Fixtures,
    UserFixture,
)

__all__ = [
    "DEFAULT_FIXTURES",
    "ArticleFixture",
    "CommentFixture",
    "Fixtures",
    "UserFixture",
]
