"""Engine and session factory configuration."""

from collections.abc import Generator
from typing import Any
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from app.core.config import get_settings

logger = logging.getLogger(__name__)

# libpq options, understood by psycopg only
POSTGRES_CONNECT_ARGS = {
    "connect_timeout": 10,
    "keepalives": 1,
    "keepalives_idle": 30,
    "keepalives_interval": 10,
    "keepalives_count": 5,
}


def driver_connect_args(url: URL) -> dict[str, Any]:
    """Driver-specific ``connect_args`` for the backend named in ``url``."""
    backend = url.get_backend_name()
    if backend == "sqlite":
        # FastAPI runs sync endpoints in a worker pool
        return {"check_same_thread": False}
    if backend == "postgresql":
        return dict(POSTGRES_CONNECT_ARGS)
    return {}


def create_db_engine(database_url: str) -> Engine:
    """Build an engine for ``database_url``.

    Server databases are pooled; PostgreSQL connections are also kept alive.
    SQLite is used for local development and tests and keeps the default pool.
    """
    url = make_url(database_url)
    connect_args = driver_connect_args(url)
    if url.get_backend_name() == "sqlite":
        return create_engine(url, echo=False, future=True, connect_args=connect_args)

    # pool_pre_ping: Test connections before using (handles stale connections)
    # pool_recycle: Recycle connections after 30 minutes (prevents timeout)
    return create_engine(
        url,
        echo=False,
        future=True,
        poolclass=QueuePool,
        pool_pre_ping=True,
        pool_recycle=1800,
        pool_size=5,
        max_overflow=10,
        connect_args=connect_args,
    )


settings = get_settings()

engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a transactional session for one unit of work.

    Commits when the caller finishes cleanly, rolls back on any error and
    always returns the connection to the pool.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
