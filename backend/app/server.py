"""Process entrypoint: migrate the database, then serve the API."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db.migrate import run_migrations
from app.main import app

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Product API server.")
    parser.add_argument("--host", help="Interface to bind (defaults to HOST)")
    parser.add_argument("--port", type=int, help="Port to bind (defaults to PORT)")
    parser.add_argument(
        "--skip-migrations",
        action="store_true",
        help="Start without upgrading the database schema",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.skip_migrations:
        logger.warning("Skipping database migrations at startup")
    else:
        try:
            run_migrations(settings.database_url)
        except (SQLAlchemyError, CommandError) as e:
            logger.critical(f"Database migration failed, not starting: {e}", exc_info=True)
            sys.exit(1)

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"Starting {settings.app_name} on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
