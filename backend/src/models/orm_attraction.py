"""
SQLAlchemy ORM Model: Attraction
Represents a ride or show observed in a park's Queue-Times feed.
"""

from sqlalchemy import String, Boolean, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base
from datetime import datetime
from typing import List


class Attraction(Base):
    __tablename__ = "attractions"

    # One attraction per (external id, owning park); never deleted, only deactivated
    __table_args__ = (
        UniqueConstraint('external_api_id', 'park_id', name='uq_attraction_external_park'),
    )

    # Primary Key
    id: Mapped[int] = mapped_column(primary_key=True)

    # Foreign Keys
    park_id: Mapped[int] = mapped_column(
        ForeignKey("parks.id"),
        nullable=False,
        index=True
    )

    # Basic Information
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    external_api_id: Mapped[int] = mapped_column(
        nullable=False,
        comment="External ride/show ID from Queue-Times.com API"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="FALSE if attraction permanently closed or removed"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now()
    )

    # Relationships
    park: Mapped["Park"] = relationship(
        "Park",
        back_populates="attractions"
    )
    wait_times: Mapped[List["WaitTimeCache"]] = relationship(
        "WaitTimeCache",
        back_populates="attraction",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Attraction(id={self.id}, name='{self.name}', park_id={self.park_id})>"
