"""
Shared test utilities and factories.

Re-exports all factory functions for convenient imports:
    from conduit.testing import create_user, create_tag, create_article
"""

from conduit.testing.factories import (
    create_article,
    create_tag,
    create_user,
)

__all__ = [
    "create_article",
    "create_tag",
    "create_user",
]
