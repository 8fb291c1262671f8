"""
Theme Park Wait Watch - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Sample Queue-Times payloads and source entries
- Mock collaborators (client, dispatcher)
- In-memory SQLite session factory with the full ORM schema

SQLite runs with StaticPool so every session (including the poller's
worker threads) shares the same in-memory database.
"""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add src to path for imports
backend_src = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(backend_src.absolute()))

from collector.queue_times_client import ParkSnapshot, SourceEntry
from database.repositories.park_repository import ParkRepository
from models import Attraction, Base, NotificationPreference, User
from utils.logger import logger


@pytest.fixture(autouse=True)
def propagate_app_logger():
    """Let caplog see records from the 'waitwatch' logger."""
    logger.propagate = True
    yield
    logger.propagate = False


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_queue_times_payload():
    """
    Sample Queue-Times.com queue_times.json payload.

    Mixes the land-grouped layout with top-level rides and shows.
    """
    return {
        "lands": [
            {
                "id": 1,
                "name": "Tomorrowland",
                "rides": [
                    {"id": 284, "name": "Space Mountain", "is_open": True, "wait_time": 45,
                     "last_updated": "2026-10-19T14:05:00.000Z"},
                    {"id": 285, "name": "Tomorrowland Speedway", "is_open": False, "wait_time": 0,
                     "last_updated": "2026-10-19T14:05:00.000Z"},
                ]
            }
        ],
        "rides": [
            {"id": 130, "name": "Haunted Mansion", "status": "OPEN", "wait_time": 25}
        ],
        "shows": [
            {"id": 900, "name": "Happily Ever After", "status": "Refurbishment", "wait_time": None}
        ]
    }


def make_snapshot(park_id: int, entries=None) -> ParkSnapshot:
    """Build a ParkSnapshot from (id, name, wait, status) tuples."""
    entries = entries if entries is not None else [(park_id * 100 + 1, f"Ride {park_id}", 30, "open")]
    return ParkSnapshot(
        park_id=park_id,
        entries=[SourceEntry(source_entity_id=i, name=n, wait_minutes=w, status=s)
                 for i, n, w, s in entries]
    )


@pytest.fixture
def mock_queue_times_client():
    """
    Mock Queue-Times API client returning one open ride per park.

    Returns:
        Mock QueueTimesClient
    """
    client = Mock()
    client.get_park_snapshot = Mock(side_effect=lambda park_id: make_snapshot(park_id))
    return client


@pytest.fixture
def mock_dispatcher():
    """Mock push dispatcher returning sequential message ids."""
    dispatcher = Mock()
    counter = {"n": 0}

    def _send(token, title, body, data):
        counter["n"] += 1
        return f"projects/waitwatch/messages/{counter['n']}"

    dispatcher.send = Mock(side_effect=_send)
    return dispatcher


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    """Session factory bound to the in-memory database."""
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture
def seeded_session_factory(session_factory):
    """Session factory with the four Walt Disney World parks seeded."""
    session = session_factory()
    ParkRepository(session).seed()
    session.commit()
    session.close()
    return session_factory


# ============================================================================
# Helper Functions
# ============================================================================

def insert_attraction(session, park_id: int, external_api_id: int, name: str,
                      is_active: bool = True) -> Attraction:
    """
    Insert an attraction and flush so it has an id.

    Note:
        Does NOT commit - callers own the transaction.
    """
    attraction = Attraction(park_id=park_id, external_api_id=external_api_id,
                            name=name, is_active=is_active)
    session.add(attraction)
    session.flush()
    return attraction


def insert_user(session, email: str, device_token=None) -> User:
    user = User(email=email, email_verified=True, device_token=device_token)
    session.add(user)
    session.flush()
    return user


def insert_preference(session, user_id: int, attraction_id: int, threshold_minutes: int,
                      reopening_alert: bool = False, is_active: bool = True) -> NotificationPreference:
    pref = NotificationPreference(
        user_id=user_id,
        attraction_id=attraction_id,
        threshold_minutes=threshold_minutes,
        reopening_alert=reopening_alert,
        is_active=is_active
    )
    session.add(pref)
    session.flush()
    return pref
