"""Request-scoped database session dependency."""

from collections.abc import Generator

from sqlalchemy.orm import Session

from app.db.session import get_db


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one SQLAlchemy session per request."""
    yield from get_db()
