"""
Theme Park Wait Watch - Wait Time Poller
Reconciles each source park's snapshot against stored history.

Per tick, for every configured source park:
1. Fetch the snapshot (a failed park is recorded and skipped)
2. Resolve the internal park by Queue-Times ID
3. For each entry: resolve-or-create the attraction, read its latest
   sample, compute the trend and append a new sample

Each entry is written in its own transaction so one bad entry never
discards the rest of the park.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from collector.queue_times_client import FetchError, QueueTimesClient, SourceEntry
from collector.trend_calculator import calculate_trend
from database.connection import SessionFactory, session_scope
from database.repositories.attraction_repository import AttractionRepository
from database.repositories.park_repository import ParkRepository
from database.repositories.wait_time_repository import WaitTimeRepository
from models import utc_now
from utils.config import POLL_MAX_WORKERS, SOURCE_PARK_IDS
from utils.logger import logger, log_poll_start, log_poll_complete, log_source_error


@dataclass(frozen=True)
class SourceError:
    """A source park that could not be polled this tick."""
    park_id: int
    message: str


@dataclass
class PollResult:
    """Outcome of one poll tick."""
    attractions_processed: int = 0
    errors: List[SourceError] = field(default_factory=list)
    parks_processed: int = 0
    started_at: Optional[datetime] = None
    duration_seconds: float = 0.0
    skipped: bool = False

    @property
    def all_sources_failed(self) -> bool:
        return not self.skipped and self.parks_processed == 0 and len(self.errors) > 0


class WaitTimePoller:
    """
    Polls the configured source parks and appends wait time samples.

    Usage:
        ```python
        poller = WaitTimePoller(get_queue_times_client(), get_session_factory())
        result = poller.run_tick()
        ```
    """

    def __init__(
        self,
        client: QueueTimesClient,
        session_factory: SessionFactory,
        park_ids: Optional[List[int]] = None,
        max_workers: int = POLL_MAX_WORKERS
    ):
        self.client = client
        self.session_factory = session_factory
        self.park_ids = list(park_ids) if park_ids is not None else list(SOURCE_PARK_IDS)
        self.max_workers = max(1, max_workers)
        self._lock = threading.Lock()

    def run_tick(self) -> PollResult:
        """
        Run one poll tick over every source park.

        Returns immediately with skipped=True when the previous tick is
        still running.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Previous poll tick still running, skipping", extra={
                "event_type": "poll_skipped"
            })
            return PollResult(started_at=datetime.now(timezone.utc), skipped=True)

        try:
            return self._run_tick()
        finally:
            self._lock.release()

    def _run_tick(self) -> PollResult:
        result = PollResult(started_at=datetime.now(timezone.utc))
        start = time.monotonic()
        log_poll_start(len(self.park_ids))

        if self.max_workers == 1 or len(self.park_ids) <= 1:
            outcomes = [self._poll_source(park_id) for park_id in self.park_ids]
        else:
            outcomes = []
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(self.park_ids))) as executor:
                futures = {executor.submit(self._poll_source, park_id): park_id
                           for park_id in self.park_ids}
                for future in as_completed(futures):
                    outcomes.append(future.result())

        for processed, error in outcomes:
            if error is not None:
                result.errors.append(error)
            else:
                result.parks_processed += 1
                result.attractions_processed += processed

        result.errors.sort(key=lambda e: e.park_id)
        result.duration_seconds = round(time.monotonic() - start, 3)
        log_poll_complete(
            result.duration_seconds,
            result.parks_processed,
            result.attractions_processed,
            len(result.errors)
        )
        return result

    def _poll_source(self, park_id: int) -> Tuple[int, Optional[SourceError]]:
        """
        Poll one source park.

        Returns:
            Tuple of (entries processed, error or None)
        """
        try:
            snapshot = self.client.get_park_snapshot(park_id)
        except FetchError as e:
            log_source_error(e, park_id)
            return 0, SourceError(park_id=park_id, message=str(e))

        try:
            with session_scope(self.session_factory) as session:
                park = ParkRepository(session).get_by_external_id(park_id)
                internal_park_id = park.id if park is not None else None
        except Exception as e:
            log_source_error(e, park_id)
            return 0, SourceError(park_id=park_id, message=f"Park lookup failed: {e}")

        if internal_park_id is None:
            logger.warning(f"Park {park_id} not found in database, skipping", extra={
                "park_id": park_id
            })
            return 0, None

        processed = 0
        for entry in snapshot.entries:
            if self._process_entry(internal_park_id, entry):
                processed += 1

        logger.info(f"Park {park_id}: {processed}/{len(snapshot.entries)} attractions updated", extra={
            "park_id": park_id,
            "attractions_processed": processed
        })
        return processed, None

    def _process_entry(self, park_id: int, entry: SourceEntry) -> bool:
        """Store one entry in its own transaction. Returns False on failure."""
        try:
            with session_scope(self.session_factory) as session:
                attraction, _ = AttractionRepository(session).resolve_or_create(
                    entry.source_entity_id, park_id, entry.name
                )
                wait_repo = WaitTimeRepository(session)
                previous = wait_repo.latest(attraction.id)
                trend = calculate_trend(
                    entry.wait_minutes,
                    previous.wait_minutes if previous is not None else None
                )
                wait_repo.append(
                    attraction_id=attraction.id,
                    wait_minutes=entry.wait_minutes,
                    status=entry.status,
                    trend=trend.value,
                    fetched_at=utc_now()
                )
            return True
        except Exception as e:
            logger.error(f"Failed to store wait time for attraction {entry.source_entity_id}", extra={
                "park_id": park_id,
                "external_api_id": entry.source_entity_id,
                "error": str(e)
            })
            return False
