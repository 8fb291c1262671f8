"""
Theme Park Wait Watch - Wait Time Sample Model
Immutable view of one wait_times_cache row plus the status/trend vocabularies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class AttractionStatus(str, Enum):
    """Normalised attraction status stored with every sample."""
    OPEN = "open"
    CLOSED = "closed"
    DOWN = "down"
    UNKNOWN = "unknown"

    @classmethod
    def normalize(cls, raw: Optional[str]) -> "AttractionStatus":
        """
        Map a raw source status string onto the stored vocabulary.

        Examples:
            >>> AttractionStatus.normalize("Open")
            <AttractionStatus.OPEN: 'open'>
            >>> AttractionStatus.normalize("REFURBISHMENT")
            <AttractionStatus.UNKNOWN: 'unknown'>
            >>> AttractionStatus.normalize(None)
            <AttractionStatus.UNKNOWN: 'unknown'>
        """
        if not raw or not isinstance(raw, str):
            return cls.UNKNOWN
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Trend(str, Enum):
    """Direction of the wait time change since the preceding sample."""
    UP = "up"
    DOWN = "down"
    SAME = "same"
    NEW = "new"


@dataclass(frozen=True)
class WaitTimeSample:
    """
    One immutable wait time observation for an attraction.

    Attributes match the wait_times_cache table.
    """
    id: int
    attraction_id: int
    wait_minutes: Optional[int]
    status: str
    trend: str
    fetched_at: datetime

    @classmethod
    def from_orm(cls, row) -> "WaitTimeSample":
        return cls(
            id=row.id,
            attraction_id=row.attraction_id,
            wait_minutes=row.wait_minutes,
            status=row.status,
            trend=row.trend,
            fetched_at=row.fetched_at,
        )

    @property
    def is_closed(self) -> bool:
        return self.status == AttractionStatus.CLOSED.value

    def to_dict(self) -> dict:
        """Convert sample to dictionary for API responses."""
        return {
            "attraction_id": self.attraction_id,
            "wait_minutes": self.wait_minutes,
            "status": self.status,
            "trend": self.trend,
            "fetched_at": self.fetched_at.isoformat() if self.fetched_at else None,
        }
