"""Shared fixtures: a throwaway SQLite database per test, migrated for real."""

from __future__ import annotations

import os
from collections.abc import Callable, Generator

# Settings are read when app.db.session is imported; the module-level engine
# is never used by the tests because get_session is overridden below.
os.environ["DEFAULT_CONNECTION"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.api.dependencies.db import get_session
from app.db.migrate import run_migrations
from app.db.session import create_db_engine
from app.main import create_app


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'products.db'}"


@pytest.fixture
def engine(database_url: str) -> Generator[Engine, None, None]:
    engine = create_db_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def client_factory() -> Generator[Callable[[Engine], TestClient], None, None]:
    """Build a TestClient whose requests use sessions bound to ``engine``."""
    clients: list[TestClient] = []

    def _make_client(engine: Engine) -> TestClient:
        TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

        def _get_test_session() -> Generator[Session, None, None]:
            db = TestingSession()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

        app = create_app()
        app.dependency_overrides[get_session] = _get_test_session
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make_client

    for client in clients:
        client.close()


@pytest.fixture
def client(
    database_url: str, engine: Engine, client_factory: Callable[[Engine], TestClient]
) -> TestClient:
    run_migrations(database_url)
    return client_factory(engine)
