"""
SQLAlchemy ORM Base Configuration
Provides the declarative base shared by all ORM models.

Sessions are created from database.connection so that every component
receives its storage handle explicitly.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


def utc_now() -> datetime:
    """Naive UTC timestamp (all DATETIME columns are stored in UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
