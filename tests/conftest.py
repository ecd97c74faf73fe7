"""
Shared fixtures: a throwaway SQLite database per test and record factories
"""

import os

os.environ["USE_FIREBASE"] = "false"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_techmeet.db")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import app.models  # noqa: F401  registers every table on Base
from app.core.db import Base
from app.schemas.event import EventCreate
from app.schemas.user import UserCreate
from app.services.event_service import EventService
from app.services.user_service import UserService
from app.utils.security import rate_limiter


@pytest.fixture
def engine(tmp_path):
    """File-backed so several sessions (and threads) see the same data"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'techmeet_test.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.clear()
    yield
    rate_limiter.clear()


def make_user(db, email, role="attendee", name=None, **profile):
    return UserService.create_user(
        db,
        UserCreate(email=email, name=name or email.split("@")[0].title(), role=role, **profile)
    )


def make_event(db, organizer_id, **overrides):
    fields = {
        "title": "Python Meetup",
        "description": "Monthly Python talks",
        "type": "in-person",
        "location": "Hall A",
        "start_date": "2030-05-01T18:00:00Z",
        "end_date": "2030-05-01T21:00:00Z",
        "category": "python",
    }
    fields.update(overrides)
    return EventService.create_event(db, organizer_id, EventCreate(**fields))


def make_published_event(db, organizer_id, **overrides):
    event_id = make_event(db, organizer_id, **overrides)
    EventService.update_event(db, event_id, {"status": "published"})
    return event_id


@pytest.fixture
def organizer_id(db_session):
    return make_user(db_session, "organizer@example.com", role="organizer", name="Olivia Organizer")


@pytest.fixture
def attendee_ids(db_session):
    return [make_user(db_session, f"attendee{i}@example.com") for i in range(1, 6)]
