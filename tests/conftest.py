"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no PostgreSQL is required for tests.
DATABASE_URL is set before the application is imported so the app's own
engine (used by the startup hook) points at the same file.
"""
import os

SQLITE_URL = "sqlite:///./test_marketsim.db"
os.environ["DATABASE_URL"] = SQLITE_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from marketsim.db.base import Base, get_db  # noqa: E402
from marketsim.main import app  # noqa: E402
from marketsim.models import Asset, Behavior, HistoryRecord  # noqa: E402

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    """Every test starts from empty tables; insertion order matters to some."""
    yield
    db = TestingSessionLocal()
    try:
        for model in (HistoryRecord, Behavior, Asset):
            db.query(model).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
