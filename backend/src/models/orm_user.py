"""
SQLAlchemy ORM Models: User and NotificationPreference
Owned by the user-facing API; the notification engine only reads them.
"""

from sqlalchemy import String, Boolean, Integer, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base
from datetime import datetime
from typing import List, Optional


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    device_token: Mapped[Optional[str]] = mapped_column(
        String(512),
        comment="FCM registration token (NULL until the app registers for push)"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now()
    )

    notification_prefs: Mapped[List["NotificationPreference"]] = relationship(
        "NotificationPreference",
        back_populates="user",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, has_device_token={self.device_token is not None})>"


class NotificationPreference(Base):
    __tablename__ = "notification_prefs"
    __table_args__ = (
        UniqueConstraint('user_id', 'attraction_id', name='uq_notification_pref_user_attraction'),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    attraction_id: Mapped[int] = mapped_column(ForeignKey("attractions.id"), nullable=False)
    threshold_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    reopening_alert: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped["User"] = relationship("User", back_populates="notification_prefs")
    attraction: Mapped["Attraction"] = relationship("Attraction")

    def __repr__(self) -> str:
        return (f"<NotificationPreference(user_id={self.user_id}, attraction_id={self.attraction_id}, "
                f"threshold={self.threshold_minutes}, active={self.is_active})>")
