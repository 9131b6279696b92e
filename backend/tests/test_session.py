"""Unit-of-work session lifecycle."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from app.db import session as session_module
from app.db.migrate import run_migrations
from app.db.models.product import Product
from app.db.session import create_db_engine, driver_connect_args


@pytest.fixture
def migrated_sessions(monkeypatch, database_url, engine):
    run_migrations(database_url)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    monkeypatch.setattr(session_module, "SessionLocal", factory)
    return factory


def count_products(factory) -> int:
    with factory() as db:
        return db.scalar(select(func.count(Product.id)))


def test_commits_when_unit_of_work_succeeds(migrated_sessions):
    gen = session_module.get_db()
    db = next(gen)
    db.add(Product(name="Widget", price=9.99))

    with pytest.raises(StopIteration):
        next(gen)

    assert count_products(migrated_sessions) == 1


def test_rolls_back_and_reraises_on_error(migrated_sessions):
    gen = session_module.get_db()
    db = next(gen)
    db.add(Product(name="Widget", price=9.99))
    db.flush()

    with pytest.raises(RuntimeError):
        gen.throw(RuntimeError("request failed"))

    assert count_products(migrated_sessions) == 0


def test_session_is_closed_after_use(migrated_sessions):
    gen = session_module.get_db()
    db = next(gen)
    db.execute(select(1))
    assert db.in_transaction()

    gen.close()

    assert not db.in_transaction()


def test_sqlite_allows_cross_thread_use():
    assert driver_connect_args(make_url("sqlite:///products.db")) == {
        "check_same_thread": False
    }


def test_postgres_gets_keepalive_options():
    args = driver_connect_args(make_url("postgresql+psycopg://u:p@db:5432/products"))

    assert args["keepalives"] == 1
    assert args["connect_timeout"] == 10


@pytest.mark.parametrize(
    "url",
    [
        "mssql+pyodbc://sa:secret@db:1433/products?driver=ODBC+Driver+18+for+SQL+Server",
        "mysql+pymysql://u:p@db:3306/products",
    ],
)
def test_other_backends_get_no_driver_options(url):
    assert driver_connect_args(make_url(url)) == {}


def test_postgres_engine_is_pooled():
    engine = create_db_engine("postgresql+psycopg://u:p@db:5432/products")
    try:
        assert isinstance(engine.pool, QueuePool)
    finally:
        engine.dispose()
