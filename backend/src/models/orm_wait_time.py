"""
SQLAlchemy ORM Model: WaitTimeCache
Append-only time series of wait time samples, one row per attraction per poll.
"""

from sqlalchemy import String, Integer, ForeignKey, DateTime, Index, BigInteger
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base, utc_now
from datetime import datetime
from typing import Optional


class WaitTimeCache(Base):
    """
    Wait time sample collected by the poller.

    Rows are never updated or deleted; the current value for an attraction
    is the row with the latest fetched_at.
    """
    __tablename__ = "wait_times_cache"

    # Primary Key (Integer variant keeps SQLite autoincrement working)
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True
    )

    # Foreign Keys
    attraction_id: Mapped[int] = mapped_column(
        ForeignKey("attractions.id"),
        nullable=False
    )

    wait_minutes: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Wait time in minutes (NULL when the source reports none)"
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default='unknown',
        comment="open, closed, down or unknown"
    )
    trend: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default='new',
        comment="up, down, same or new (relative to the preceding sample)"
    )
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        comment="UTC timestamp when the sample was collected"
    )

    __table_args__ = (
        Index('idx_wait_times_attraction_fetched', 'attraction_id', 'fetched_at'),
    )

    # Relationships
    attraction: Mapped["Attraction"] = relationship(
        "Attraction",
        back_populates="wait_times"
    )

    def __repr__(self) -> str:
        return (f"<WaitTimeCache(id={self.id}, attraction_id={self.attraction_id}, "
                f"wait={self.wait_minutes}, status='{self.status}', time={self.fetched_at})>")
