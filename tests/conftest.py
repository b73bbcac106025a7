"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from incident_timeline import models  # noqa: F401
from incident_timeline.database import Base, get_db
from incident_timeline.models.event import Event
from incident_timeline.models.evidence import Evidence
from incident_timeline.services.auth import AuthEvents, ensure_moderator, sign_in
from incident_timeline.services.storage import ObjectStorage, get_storage

MODERATOR_EMAIL = "mod@example.com"
MODERATOR_PASSWORD = "correct horse battery staple"


@pytest.fixture(scope="function")
def test_db():
    """Create a test database for each test."""
    # Use in-memory SQLite for testing
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    yield db

    db.close()
    engine.dispose()


@pytest.fixture
def storage(tmp_path):
    """Object storage bucket in a temporary directory."""
    return ObjectStorage(root=str(tmp_path), bucket="evidence-files", public_base_url="/files")


@pytest.fixture
def client(test_db, storage):
    """Test client sharing the test database session and storage."""
    from incident_timeline.main import app

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def moderator(test_db):
    return ensure_moderator(test_db, MODERATOR_EMAIL, MODERATOR_PASSWORD)


@pytest.fixture
def events():
    """Isolated session-change registry."""
    return AuthEvents()


@pytest.fixture
def session(test_db, moderator, events):
    """Signed-in moderator session."""
    return sign_in(test_db, MODERATOR_EMAIL, MODERATOR_PASSWORD, events=events)


@pytest.fixture
def make_event(test_db):
    """Insert an event row directly."""

    def _make(title="Fire breaks out", status="pending", date=None, description=None, created_at=None):
        event = Event(
            title=title,
            date=date or datetime(2025, 11, 26, 14, 51),
            description=description,
            status=status,
        )
        if created_at is not None:
            event.created_at = created_at
        test_db.add(event)
        test_db.commit()
        return event

    return _make


@pytest.fixture
def make_evidence(test_db):
    """Insert an evidence row directly."""

    def _make(event, title="News report", type="link", side="neutral",
              content_url="https://example.com/report", status="pending", created_at=None):
        item = Evidence(
            event_id=event.id,
            title=title,
            type=type,
            side=side,
            content_url=content_url,
            status=status,
        )
        if created_at is not None:
            item.created_at = created_at
        test_db.add(item)
        test_db.commit()
        return item

    return _make
