"""Programmatic access to the Alembic migrations."""

from pathlib import Path

from alembic import command
from alembic.config import Config

from conduit.core.config import settings

BACKEND_DIR = Path(__file__).resolve().parents[2]


def _get_alembic_config(database_url: str) -> Config:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    config.attributes["configure_logger"] = False
    config.attributes["url_configured"] = True
    return config


def run_migrations(database_url: str | None = None) -> None:
    """Upgrade the database to the latest revision.

    The Alembic environment drives its own event loop, so call this from a
    thread (``asyncio.to_thread``) when already inside one.
    """
    command.upgrade(_get_alembic_config(database_url or settings.DATABASE_URL), "head")


if __name__ == "__main__":  # pragma: no cover
    run_migrations()
