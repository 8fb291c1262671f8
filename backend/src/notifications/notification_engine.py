"""
Theme Park Wait Watch - Notification Evaluation Engine
Evaluates users' standing preferences against the wait time cache.

Rules:
- threshold_met: latest wait_minutes <= threshold_minutes. Fires on every
  tick while the condition holds (not edge-triggered).
- reopening: the sample before the latest was closed and the latest is
  not. Only for preferences with reopening_alert set.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from database.connection import SessionFactory, session_scope
from database.repositories.notification_repository import (
    ActivePreference, NotificationRepository, PushRecipient
)
from database.repositories.wait_time_repository import WaitTimeRepository
from models.wait_time import AttractionStatus
from notifications.push_dispatcher import DispatchError
from utils.config import NOTIFICATION_MAX_WORKERS
from utils.logger import logger, log_dispatch_error, log_evaluation_complete


THRESHOLD_MET = 'threshold_met'
REOPENING = 'reopening'


@dataclass(frozen=True)
class PendingNotification:
    """A notification decided for one preference, not yet dispatched."""
    attraction_id: int
    type: str
    title: str
    body: str

    @property
    def data(self) -> Dict[str, str]:
        return {"attraction_id": str(self.attraction_id), "type": self.type}


@dataclass(frozen=True)
class DispatchRecord:
    user_id: int
    attraction_id: int
    type: str
    message_id: str


@dataclass(frozen=True)
class DispatchFailure:
    user_id: int
    attraction_id: Optional[int]
    type: Optional[str]
    error: str


@dataclass
class EvaluationResult:
    """Outcome of one evaluation tick."""
    users_evaluated: int = 0
    dispatches: List[DispatchRecord] = field(default_factory=list)
    failures: List[DispatchFailure] = field(default_factory=list)
    started_at: Optional[datetime] = None
    duration_seconds: float = 0.0
    skipped: bool = False

    @property
    def notifications_sent(self) -> int:
        return len(self.dispatches)


def check_reopening(statuses: Sequence[str]) -> bool:
    """
    Detect a closed -> not-closed transition.

    Args:
        statuses: Stored statuses, oldest first

    Examples:
        >>> check_reopening(["closed", "open"])
        True
        >>> check_reopening(["open", "open"])
        False
        >>> check_reopening(["closed", "closed"])
        False
        >>> check_reopening(["open"])
        False
    """
    if len(statuses) < 2:
        return False
    previous, current = statuses[-2], statuses[-1]
    closed = AttractionStatus.CLOSED.value
    return previous == closed and current != closed


def threshold_notification(pref: ActivePreference, wait_minutes: Optional[int]) -> Optional[PendingNotification]:
    # An unknown wait never satisfies a threshold
    if wait_minutes is None or wait_minutes > pref.threshold_minutes:
        return None
    return PendingNotification(
        attraction_id=pref.attraction_id,
        type=THRESHOLD_MET,
        title=f"{pref.attraction_name} - {wait_minutes} min wait",
        body="Wait time dropped below your threshold!",
    )


def reopening_notification(pref: ActivePreference) -> PendingNotification:
    return PendingNotification(
        attraction_id=pref.attraction_id,
        type=REOPENING,
        title=f"{pref.attraction_name} has reopened!",
        body="The attraction is now open!",
    )


class NotificationEngine:
    """
    Runs evaluation ticks over every user with a device token.

    Failures are isolated per preference: a rejected push is recorded and
    evaluation continues with the next preference and the next user.
    """

    def __init__(self, session_factory: SessionFactory, dispatcher,
                 max_workers: int = NOTIFICATION_MAX_WORKERS):
        self.session_factory = session_factory
        self.dispatcher = dispatcher
        self.max_workers = max(1, max_workers)
        self._lock = threading.Lock()

    def run_tick(self) -> EvaluationResult:
        """
        Evaluate all users once.

        Returns immediately with skipped=True when the previous tick is
        still running.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Previous evaluation tick still running, skipping", extra={
                "event_type": "evaluation_skipped"
            })
            return EvaluationResult(started_at=datetime.now(timezone.utc), skipped=True)

        try:
            return self._run_tick()
        finally:
            self._lock.release()

    def _run_tick(self) -> EvaluationResult:
        result = EvaluationResult(started_at=datetime.now(timezone.utc))
        start = time.monotonic()

        with session_scope(self.session_factory) as session:
            recipients = NotificationRepository(session).get_push_recipients()

        if self.max_workers == 1 or len(recipients) <= 1:
            outcomes = [self._evaluate_user_safely(r) for r in recipients]
        else:
            outcomes = []
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._evaluate_user_safely, r) for r in recipients]
                for future in as_completed(futures):
                    outcomes.append(future.result())

        for dispatches, failures in outcomes:
            result.users_evaluated += 1
            result.dispatches.extend(dispatches)
            result.failures.extend(failures)

        result.duration_seconds = round(time.monotonic() - start, 3)
        log_evaluation_complete(
            result.duration_seconds,
            result.users_evaluated,
            result.notifications_sent,
            len(result.failures)
        )
        return result

    def _evaluate_user_safely(self, recipient: PushRecipient) -> Tuple[List[DispatchRecord], List[DispatchFailure]]:
        try:
            return self.evaluate_user(recipient)
        except Exception as e:
            log_dispatch_error(e, recipient.user_id)
            return [], [DispatchFailure(user_id=recipient.user_id, attraction_id=None,
                                        type=None, error=str(e))]

    def collect_notifications(self, user_id: int) -> List[PendingNotification]:
        """Decide which notifications a user should receive right now."""
        pending = []
        with session_scope(self.session_factory) as session:
            prefs = NotificationRepository(session).get_active_preferences(user_id)
            wait_repo = WaitTimeRepository(session)

            for pref in prefs:
                samples = wait_repo.latest_two(pref.attraction_id)
                if not samples:
                    continue

                notification = threshold_notification(pref, samples[0].wait_minutes)
                if notification is not None:
                    pending.append(notification)

                if pref.reopening_alert and check_reopening([s.status for s in reversed(samples)]):
                    pending.append(reopening_notification(pref))

        return pending

    def evaluate_user(self, recipient: PushRecipient) -> Tuple[List[DispatchRecord], List[DispatchFailure]]:
        """
        Evaluate and dispatch for one user.

        Returns:
            Tuple of (successful dispatches, failed dispatches)
        """
        dispatches: List[DispatchRecord] = []
        failures: List[DispatchFailure] = []

        for notification in self.collect_notifications(recipient.user_id):
            try:
                message_id = self.dispatcher.send(
                    recipient.device_token,
                    notification.title,
                    notification.body,
                    notification.data
                )
            except DispatchError as e:
                log_dispatch_error(e, recipient.user_id, notification.attraction_id)
                failures.append(DispatchFailure(
                    user_id=recipient.user_id,
                    attraction_id=notification.attraction_id,
                    type=notification.type,
                    error=str(e)
                ))
                continue

            logger.info(f"Sent {notification.type} notification to user {recipient.user_id}", extra={
                "user_id": recipient.user_id,
                "attraction_id": notification.attraction_id,
                "notification_type": notification.type
            })
            dispatches.append(DispatchRecord(
                user_id=recipient.user_id,
                attraction_id=notification.attraction_id,
                type=notification.type,
                message_id=message_id
            ))

        return dispatches, failures
