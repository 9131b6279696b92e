"""Startup schema migration through Alembic."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Connection

from app.db.session import create_db_engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def build_alembic_config(database_url: str | None = None) -> Config:
    """Alembic configuration pointing at the migration scripts in this package."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if database_url:
        # ConfigParser interpolation treats "%" specially
        config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


@lru_cache
def head_revision() -> str:
    """Return the newest revision shipped with the code (read from disk once)."""
    script = ScriptDirectory.from_config(build_alembic_config())
    head = script.get_current_head()
    if head is None:
        raise RuntimeError(f"No migration scripts found in {MIGRATIONS_DIR}")
    return head


def connection_revision(connection: Connection) -> str | None:
    """Revision stamped in the database behind ``connection``, or None if unmigrated."""
    return MigrationContext.configure(connection).get_current_revision()


def current_revision(database_url: str) -> str | None:
    """Return the revision the database is stamped at, or None if unmigrated."""
    engine = create_db_engine(database_url)
    try:
        with engine.connect() as connection:
            return connection_revision(connection)
    finally:
        engine.dispose()


def run_migrations(database_url: str, revision: str = "head") -> None:
    """Bring the database schema up to ``revision``.

    A database already at the target revision is left untouched. Errors are
    not caught here; the caller decides whether a failed migration is fatal.
    """
    before = current_revision(database_url)
    logger.info(
        f"Database schema at revision {before or '<none>'}, upgrading to {revision}"
    )
    command.upgrade(build_alembic_config(database_url), revision)
    after = current_revision(database_url)
    if before == after:
        logger.info("Database schema already up to date")
    else:
        logger.info(f"Database schema migrated to revision {after}")
