"""
SQLAlchemy ORM Model: Park
Represents a source park tracked on Queue-Times.com.
"""

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base
from datetime import datetime
from typing import List, Optional


class Park(Base):
    __tablename__ = "parks"

    # Primary Key
    id: Mapped[int] = mapped_column(primary_key=True)

    # Basic Information
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    abbreviation: Mapped[Optional[str]] = mapped_column(String(20))

    # Queue-Times.com Integration
    external_api_id: Mapped[int] = mapped_column(
        nullable=False,
        unique=True,
        comment="External park ID from Queue-Times.com API"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now()
    )

    # Relationships
    attractions: Mapped[List["Attraction"]] = relationship(
        "Attraction",
        back_populates="park",
        lazy="select"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "abbreviation": self.abbreviation,
            "external_api_id": self.external_api_id,
        }

    def __repr__(self) -> str:
        return f"<Park(id={self.id}, name='{self.name}', external_api_id={self.external_api_id})>"
