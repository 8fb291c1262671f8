"""
Theme Park Wait Watch - Queue-Times.com API Client
Fetches per-park wait time snapshots.

No retry here: a failed park is skipped for the tick and the next poll
tick is the retry.
"""

import requests
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from collector.trend_calculator import validate_wait_time
from models.wait_time import AttractionStatus
from utils.config import QUEUE_TIMES_API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from utils.logger import logger


class FetchError(Exception):
    """Raised when a park snapshot cannot be fetched or parsed."""

    def __init__(self, park_id: int, message: str):
        self.park_id = park_id
        super().__init__(f"Park {park_id}: {message}")


@dataclass(frozen=True)
class SourceEntry:
    """One attraction as reported by the source."""
    source_entity_id: int
    name: str
    wait_minutes: Optional[int]
    status: str


@dataclass
class ParkSnapshot:
    """All attractions reported for one park at fetch time."""
    park_id: int
    entries: List[SourceEntry] = field(default_factory=list)


class QueueTimesClient:
    """
    Client for the Queue-Times.com park wait time feed.

    The payload carries rides and shows at the top level and rides grouped
    by land; all three are flattened into one list of entries.
    """

    def __init__(self, base_url: str = QUEUE_TIMES_API_BASE_URL,
                 timeout: int = REQUEST_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'ThemeParkWaitWatch/1.0 (Wait Time Poller)',
            'Accept': 'application/json'
        })

    def get_park_snapshot(self, park_id: int) -> ParkSnapshot:
        """
        Fetch current wait times for all attractions at a specific park.

        Args:
            park_id: Queue-Times.com park ID

        Returns:
            ParkSnapshot with normalised entries

        Raises:
            FetchError: On timeout, transport error, non-2xx status or
                malformed payload
        """
        url = f"{self.base_url}/{park_id}/queue_times.json"
        logger.debug(f"Fetching wait times for park {park_id}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            raise FetchError(park_id, f"timed out after {self.timeout}s") from e
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 'error'
            raise FetchError(park_id, f"HTTP {status_code}") from e
        except requests.RequestException as e:
            raise FetchError(park_id, f"request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(park_id, "response body is not valid JSON") from e

        if not isinstance(payload, dict):
            raise FetchError(park_id, "response body is not a JSON object")

        entries = self._parse_entries(payload)
        logger.debug(f"Fetched {len(entries)} attractions for park {park_id}")
        return ParkSnapshot(park_id=park_id, entries=entries)

    def _parse_entries(self, payload: Dict[str, Any]) -> List[SourceEntry]:
        items: List[Any] = []
        items.extend(_as_list(payload.get('rides')))
        items.extend(_as_list(payload.get('shows')))
        for land in _as_list(payload.get('lands')):
            if isinstance(land, dict):
                items.extend(_as_list(land.get('rides')))

        entries = []
        for item in items:
            entry = self._parse_item(item)
            if entry is not None:
                entries.append(entry)
        return entries

    @staticmethod
    def _parse_item(item: Any) -> Optional[SourceEntry]:
        if not isinstance(item, dict) or item.get('id') is None:
            return None

        try:
            source_entity_id = int(item['id'])
        except (TypeError, ValueError):
            return None

        raw_status = item.get('status')
        if raw_status is None and item.get('is_open') is not None:
            raw_status = 'open' if item['is_open'] else 'closed'

        return SourceEntry(
            source_entity_id=source_entity_id,
            name=str(item.get('name') or f"Attraction {source_entity_id}"),
            wait_minutes=validate_wait_time(item.get('wait_time')),
            status=AttractionStatus.normalize(raw_status).value,
        )

    def close(self):
        """Close the HTTP session."""
        self.session.close()


def _as_list(value: Any) -> Iterable[Any]:
    return value if isinstance(value, list) else []


# Singleton instance
_client: Optional[QueueTimesClient] = None


def get_queue_times_client() -> QueueTimesClient:
    """
    Get or create singleton Queue-Times API client.

    Returns:
        QueueTimesClient instance
    """
    global _client
    if _client is None:
        _client = QueueTimesClient()
    return _client
