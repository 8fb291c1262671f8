"""
Theme Park Wait Watch - Park Repository
Provides data access layer for the parks table using SQLAlchemy ORM.
"""

from typing import List, Optional, Dict, Any
from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Park


# Walt Disney World Resort parks as listed on Queue-Times.com
DEFAULT_PARKS: List[Dict[str, Any]] = [
    {'name': 'Magic Kingdom Park', 'abbreviation': 'MK', 'external_api_id': 1},
    {'name': 'EPCOT', 'abbreviation': 'EPCOT', 'external_api_id': 2},
    {'name': "Disney's Hollywood Studios", 'abbreviation': 'DHS', 'external_api_id': 3},
    {'name': "Disney's Animal Kingdom Theme Park", 'abbreviation': 'DAK', 'external_api_id': 4},
]


class ParkRepository:
    """
    Repository for park entity operations.

    Implements:
    - Lookup by internal and Queue-Times ID
    - Idempotent seeding of the fixed source parks
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, park_id: int) -> Optional[Park]:
        return self.session.get(Park, park_id)

    def get_by_external_id(self, external_api_id: int) -> Optional[Park]:
        """
        Fetch park by Queue-Times.com park ID.

        Args:
            external_api_id: Queue-Times.com park ID

        Returns:
            Park or None if the park has not been seeded
        """
        stmt = select(Park).where(Park.external_api_id == external_api_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_all(self) -> List[Park]:
        stmt = select(Park).order_by(Park.name)
        return list(self.session.execute(stmt).scalars())

    def seed(self, parks: Optional[List[Dict[str, Any]]] = None) -> int:
        """
        Insert any missing parks (matched on external_api_id).

        Returns:
            Number of parks created
        """
        created = 0
        for park_data in parks or DEFAULT_PARKS:
            if self.get_by_external_id(park_data['external_api_id']) is None:
                self.session.add(Park(**park_data))
                created += 1
        self.session.flush()
        return created
