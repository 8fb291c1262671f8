"""
Theme Park Wait Watch - Attraction Repository
Provides data access layer for the attractions table using SQLAlchemy ORM.
"""

from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.connection import PersistenceError
from models import Attraction, Park
from utils.logger import logger, log_database_error


class AttractionRepository:
    """
    Repository for attraction entity operations.

    Attractions are created the first time the poller sees them and are
    never deleted, only deactivated.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, attraction_id: int) -> Optional[Attraction]:
        return self.session.get(Attraction, attraction_id)

    def get_by_external_id(self, external_api_id: int, park_id: int) -> Optional[Attraction]:
        """
        Fetch attraction by its Queue-Times ID within the owning park.

        Args:
            external_api_id: Queue-Times.com ride/show ID
            park_id: Internal park ID

        Returns:
            Attraction or None if not seen before
        """
        stmt = select(Attraction).where(
            Attraction.external_api_id == external_api_id,
            Attraction.park_id == park_id
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def resolve_or_create(self, external_api_id: int, park_id: int, name: str) -> Tuple[Attraction, bool]:
        """
        Return the attraction for (external_api_id, park_id), creating it on first sight.

        Repeated calls with the same pair never create a second row; the
        unique constraint on (external_api_id, park_id) backs this up.

        Returns:
            Tuple of (attraction, created)

        Raises:
            PersistenceError: If the lookup or insert fails
        """
        try:
            attraction = self.get_by_external_id(external_api_id, park_id)
            if attraction is not None:
                return attraction, False

            attraction = Attraction(park_id=park_id, name=name, external_api_id=external_api_id)
            self.session.add(attraction)
            self.session.flush()

            logger.info(f"New attraction discovered: {name}", extra={
                "attraction_id": attraction.id,
                "park_id": park_id,
                "external_api_id": external_api_id
            })
            return attraction, True

        except SQLAlchemyError as e:
            log_database_error(e, f"Failed to resolve attraction {external_api_id} in park {park_id}")
            raise PersistenceError(
                f"Failed to resolve attraction {external_api_id} in park {park_id}: {e}"
            ) from e

    def get_active_by_park(self, park_id: int) -> List[Attraction]:
        stmt = (
            select(Attraction)
            .where(Attraction.park_id == park_id, Attraction.is_active.is_(True))
            .order_by(Attraction.name)
        )
        return list(self.session.execute(stmt).scalars())

    def get_active_with_park(self, attraction_id: int) -> Optional[Tuple[Attraction, Park]]:
        """Active attraction joined with its park, or None."""
        stmt = (
            select(Attraction, Park)
            .join(Park, Attraction.park_id == Park.id)
            .where(Attraction.id == attraction_id, Attraction.is_active.is_(True))
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1]

    def deactivate(self, attraction_id: int) -> bool:
        """Mark an attraction inactive. Returns False if it does not exist."""
        attraction = self.get_by_id(attraction_id)
        if attraction is None:
            return False
        attraction.is_active = False
        self.session.flush()
        return True
