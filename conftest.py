"""
Shared pytest fixtures.

Every test gets its own in-memory SQLite database. The environment is set
before any app module is imported so nothing touches ./data or ./uploads.
"""
import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SEED_DEFAULTS", "false")
os.environ.setdefault("MEDIA_DIR", tempfile.mkdtemp(prefix="portfolio-media-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from apps.shared import auth
from apps.shared.database import Base, get_db
from apps.portfolio.models import Section, SiteSetting  # noqa: F401
from apps.media.models import Media  # noqa: F401

TEST_API_KEY = "test-admin-key"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _client_for(app, session_factory, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(auth, "INTERNAL_API_KEY", TEST_API_KEY)
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def client(session_factory, monkeypatch):
    from apps.portfolio.main import app

    yield _client_for(app, session_factory, monkeypatch)
    app.dependency_overrides.clear()


@pytest.fixture
def media_client(session_factory, monkeypatch):
    from apps.media.main import app

    yield _client_for(app, session_factory, monkeypatch)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {auth.API_KEY_HEADER: TEST_API_KEY}
