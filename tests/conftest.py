"""
- Spins up temp test DB
- Create tables before tests run
- Provide a db_session fixture and override FastAPI's get_db so routes use the test session.
- Provide a client fixture (TestClient(app)) that already has the DB override applied.
- Reset the in-memory match between tests.
"""
import os
import pytest
from typing import Generator

# Must be set before digit_duel.db / digit_duel.config are imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
# Ensure the app does NOT run dev-only startup hooks or call random.org
os.environ["APP_ENV"] = "test"
os.environ["USE_RANDOM_ORG"] = "0"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from digit_duel.db import Base, get_db
from digit_duel.main import app, match_store
from digit_duel import models  # noqa: F401  (registers tables)

# Use SQLite in-memory for tests (fast, isolated)
TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"

@pytest.fixture(scope="session")
def engine():
    # StaticPool + check_same_thread=False lets Starlette's TestClient and SQLAlchemy
    # share ONE in-memory SQLite database across threads.
    engine = create_engine(
        TEST_DATABASE_URL,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(engine) -> Generator:
    """Provide a clean session per test with rollback."""
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    try:
        yield db
        db.rollback()
    finally:
        db.close()

@pytest.fixture(autouse=True)
def _clean_db(engine):
    """The repository commits, so wipe rows before each test."""
    with engine.begin() as conn:
        conn.execute(text("DELETE FROM results"))
        conn.execute(text("DELETE FROM stats"))
    yield

@pytest.fixture(autouse=True)
def _clean_match():
    """One match lives in process memory; start every test without it."""
    match_store.clear()
    yield
    match_store.clear()

@pytest.fixture(autouse=True)
def override_dep(db_session):
    """Force the app to use our test session for every request."""
    def _get_db_for_tests():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_for_tests
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def client():
    return TestClient(app)
