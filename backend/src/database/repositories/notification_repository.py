"""
Theme Park Wait Watch - Notification Preference Repository
Read access for the notification engine, plus the upsert/toggle operations
the user-facing API uses to maintain subscriptions.
"""

from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Attraction, NotificationPreference, User


@dataclass(frozen=True)
class ActivePreference:
    """An active preference joined with the attraction name for message text."""
    user_id: int
    attraction_id: int
    attraction_name: str
    threshold_minutes: int
    reopening_alert: bool


@dataclass(frozen=True)
class PushRecipient:
    """A user that can receive push notifications."""
    user_id: int
    device_token: str


class NotificationRepository:
    """Repository for users' push tokens and notification preferences."""

    def __init__(self, session: Session):
        self.session = session

    def get_push_recipients(self) -> List[PushRecipient]:
        """All users with a non-null, non-empty device token."""
        stmt = (
            select(User.id, User.device_token)
            .where(User.device_token.is_not(None), User.device_token != '')
            .order_by(User.id)
        )
        return [
            PushRecipient(user_id=row.id, device_token=row.device_token)
            for row in self.session.execute(stmt)
        ]

    def get_active_preferences(self, user_id: int) -> List[ActivePreference]:
        """
        Active preferences for a user, joined with the attraction name.

        Args:
            user_id: User ID

        Returns:
            List of ActivePreference (inactive rows are skipped)
        """
        stmt = (
            select(
                NotificationPreference.user_id,
                NotificationPreference.attraction_id,
                Attraction.name.label('attraction_name'),
                NotificationPreference.threshold_minutes,
                NotificationPreference.reopening_alert,
            )
            .join(Attraction, NotificationPreference.attraction_id == Attraction.id)
            .where(
                NotificationPreference.user_id == user_id,
                NotificationPreference.is_active.is_(True)
            )
            .order_by(NotificationPreference.attraction_id)
        )
        return [
            ActivePreference(
                user_id=row.user_id,
                attraction_id=row.attraction_id,
                attraction_name=row.attraction_name,
                threshold_minutes=row.threshold_minutes,
                reopening_alert=bool(row.reopening_alert),
            )
            for row in self.session.execute(stmt)
        ]

    def get_preference(self, user_id: int, attraction_id: int) -> Optional[NotificationPreference]:
        stmt = select(NotificationPreference).where(
            NotificationPreference.user_id == user_id,
            NotificationPreference.attraction_id == attraction_id
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert_preference(
        self,
        user_id: int,
        attraction_id: int,
        threshold_minutes: int,
        reopening_alert: bool = False,
        is_active: bool = True
    ) -> NotificationPreference:
        """Create the (user, attraction) preference or overwrite its settings."""
        pref = self.get_preference(user_id, attraction_id)
        if pref is None:
            pref = NotificationPreference(user_id=user_id, attraction_id=attraction_id)
            self.session.add(pref)
        pref.threshold_minutes = threshold_minutes
        pref.reopening_alert = reopening_alert
        pref.is_active = is_active
        self.session.flush()
        return pref

    def set_active(self, user_id: int, attraction_id: int, is_active: bool) -> bool:
        """Toggle a preference. Returns False if the user never subscribed."""
        pref = self.get_preference(user_id, attraction_id)
        if pref is None:
            return False
        pref.is_active = is_active
        self.session.flush()
        return True
