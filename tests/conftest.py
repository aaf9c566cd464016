# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import os

import pytest

# Set test environment before app modules read settings
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["OPENAI_API_KEY"] = ""
os.environ["ADMIN_API_KEY"] = "test-admin-key"

from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app import models  # noqa: E402
from app.database import Base  # noqa: E402
from app.services.llm_classifier import ClassificationEnricher  # noqa: E402
from helpers import USER_ID, FakeLLMProvider  # noqa: E402



def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "llm: tests requiring LLM API calls (deselect with '-m \"not llm\"')")


# -----------------------------------------------------------------------------
# Database
# -----------------------------------------------------------------------------

@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so concurrent sessions see each other's commits."""
    eng = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        future=True,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(eng, "connect")
    def _enable_sqlite_fks(dbapi_conn, _record):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are enabled
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_feed(db):
    """Create a registered feed."""

    def _make(url="https://example.com/feed.xml", title="Example Feed", user_id=USER_ID, category=None):
        feed = models.Feed(user_id=user_id, url=url, title=title, category=category)
        db.add(feed)
        db.commit()
        db.refresh(feed)
        return feed

    return _make


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------

@pytest.fixture
def fake_provider():
    return FakeLLMProvider()


@pytest.fixture
def no_classifier():
    """Classifier with no provider: every record is stored unclassified."""
    return ClassificationEnricher(provider=None, use_default_provider=False)
