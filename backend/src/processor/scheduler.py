"""
Theme Park Wait Watch - Worker Scheduler
Runs the poll and notification evaluation ticks on two independent
APScheduler interval jobs.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from notifications.notification_engine import NotificationEngine
from processor.wait_time_poller import PollResult, WaitTimePoller
from utils.config import (
    ALERT_COOLDOWN_MINUTES, NOTIFICATION_INTERVAL_SECONDS, POLL_INTERVAL_SECONDS
)
from utils.email_utils import send_alert_email
from utils.logger import logger


POLL_JOB_ID = "poll_wait_times"
EVALUATION_JOB_ID = "evaluate_notifications"


class WorkerScheduler:
    """
    Owns both schedules. Each job starts immediately, never overlaps with
    itself (max_instances=1) and collapses missed runs (coalesce=True).

    Usage:
        ```python
        workers = WorkerScheduler(poller, engine, blocking=True)
        workers.start()  # blocks until interrupted
        ```
    """

    def __init__(
        self,
        poller: WaitTimePoller,
        engine: NotificationEngine,
        poll_interval_seconds: int = POLL_INTERVAL_SECONDS,
        notification_interval_seconds: int = NOTIFICATION_INTERVAL_SECONDS,
        alert_cooldown_minutes: int = ALERT_COOLDOWN_MINUTES,
        blocking: bool = False
    ):
        self.poller = poller
        self.engine = engine
        self.poll_interval_seconds = poll_interval_seconds
        self.notification_interval_seconds = notification_interval_seconds
        self.alert_cooldown = timedelta(minutes=alert_cooldown_minutes)
        self.scheduler = BlockingScheduler(timezone=timezone.utc) if blocking \
            else BackgroundScheduler(timezone=timezone.utc)
        self._last_alert_at: Optional[datetime] = None

    def run_poll_job(self):
        """Job wrapper: one poll tick, never raises."""
        try:
            result = self.poller.run_tick()
        except Exception as e:
            logger.error(f"Scheduler: poll job failed - {e}", exc_info=True)
            return None

        if result.all_sources_failed:
            self._alert_all_sources_failed(result)
        return result

    def run_evaluation_job(self):
        """Job wrapper: one evaluation tick, never raises."""
        try:
            return self.engine.run_tick()
        except Exception as e:
            logger.error(f"Scheduler: evaluation job failed - {e}", exc_info=True)
            return None

    def _alert_all_sources_failed(self, result: PollResult):
        now = datetime.now(timezone.utc)
        if self._last_alert_at is not None and now - self._last_alert_at < self.alert_cooldown:
            logger.info("All sources failed, alert suppressed (cooldown)")
            return

        lines = [f"  park {error.park_id}: {error.message}" for error in result.errors]
        body = (
            f"Every configured source park failed in the poll tick started at "
            f"{result.started_at.isoformat() if result.started_at else now.isoformat()}.\n\n"
            + "\n".join(lines)
            + "\n\nWait times are going stale until the source recovers."
        )
        sent = send_alert_email(
            subject="Wait Watch ALERT: all wait time sources failing",
            body=body,
            alert_type="all_sources_failed"
        )
        if sent:
            self._last_alert_at = now

    def start(self):
        """Register both jobs and start the scheduler."""
        now = datetime.now(timezone.utc)
        self.scheduler.add_job(
            self.run_poll_job,
            trigger=IntervalTrigger(seconds=self.poll_interval_seconds),
            id=POLL_JOB_ID,
            next_run_time=now,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        self.scheduler.add_job(
            self.run_evaluation_job,
            trigger=IntervalTrigger(seconds=self.notification_interval_seconds),
            id=EVALUATION_JOB_ID,
            next_run_time=now,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        logger.info("Worker scheduler started", extra={
            "poll_interval_seconds": self.poll_interval_seconds,
            "notification_interval_seconds": self.notification_interval_seconds
        })
        self.scheduler.start()

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Worker scheduler stopped")
