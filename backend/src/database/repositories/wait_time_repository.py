"""
Theme Park Wait Watch - Wait Time Cache Repository
Append-only access to the wait_times_cache time series.

Exposes no update or delete operations: sample history is immutable.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.connection import PersistenceError
from models import WaitTimeCache, WaitTimeSample, utc_now
from utils.logger import logger, log_database_error


class WaitTimeRepository:
    """
    Repository for wait time samples.

    Implements:
    - append() - the poller's single write path; fetched_at never decreases
    - latest() / latest_two() - most recent samples, newest first
    """

    def __init__(self, session: Session):
        self.session = session

    def append(
        self,
        attraction_id: int,
        wait_minutes: Optional[int],
        status: str,
        trend: str,
        fetched_at: Optional[datetime] = None
    ) -> WaitTimeSample:
        """
        Append a new sample for an attraction.

        Args:
            attraction_id: Internal attraction ID
            wait_minutes: Wait time in minutes (None when not reported)
            status: Normalised status (open/closed/down/unknown)
            trend: Trend relative to the preceding sample
            fetched_at: Observation time (defaults to now, UTC). Clamped to
                the previous sample's time if the clock has stepped back.

        Returns:
            The stored sample

        Raises:
            PersistenceError: If the insert fails
        """
        fetched_at = fetched_at or utc_now()
        previous = self.latest(attraction_id)
        if previous is not None and fetched_at < previous.fetched_at:
            logger.warning(f"Clock behind last sample for attraction {attraction_id}, clamping", extra={
                "attraction_id": attraction_id,
                "fetched_at": fetched_at.isoformat(),
                "previous_fetched_at": previous.fetched_at.isoformat()
            })
            fetched_at = previous.fetched_at

        row = WaitTimeCache(
            attraction_id=attraction_id,
            wait_minutes=wait_minutes,
            status=status,
            trend=trend,
            fetched_at=fetched_at,
        )
        try:
            self.session.add(row)
            self.session.flush()
        except SQLAlchemyError as e:
            log_database_error(e, f"Failed to append wait time for attraction {attraction_id}")
            raise PersistenceError(
                f"Failed to append wait time for attraction {attraction_id}: {e}"
            ) from e

        return WaitTimeSample.from_orm(row)

    def _recent(self, attraction_id: int, limit: int) -> List[WaitTimeSample]:
        stmt = (
            select(WaitTimeCache)
            .where(WaitTimeCache.attraction_id == attraction_id)
            .order_by(WaitTimeCache.fetched_at.desc(), WaitTimeCache.id.desc())
            .limit(limit)
        )
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            log_database_error(e, f"Failed to read wait times for attraction {attraction_id}")
            raise PersistenceError(
                f"Failed to read wait times for attraction {attraction_id}: {e}"
            ) from e
        return [WaitTimeSample.from_orm(row) for row in rows]

    def latest(self, attraction_id: int) -> Optional[WaitTimeSample]:
        """Most recent sample for an attraction, or None if it has no history."""
        samples = self._recent(attraction_id, 1)
        return samples[0] if samples else None

    def latest_two(self, attraction_id: int) -> List[WaitTimeSample]:
        """
        The two most recent samples, newest first.

        Used for reopening detection: index 1 holds the status the
        attraction had before the current sample.
        """
        return self._recent(attraction_id, 2)

    def newest_fetched_at(self) -> Optional[datetime]:
        """Timestamp of the newest sample across all attractions (health check)."""
        return self.session.execute(select(func.max(WaitTimeCache.fetched_at))).scalar()
