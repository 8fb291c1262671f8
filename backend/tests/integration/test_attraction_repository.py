"""
Theme Park Wait Watch - Attraction Repository Integration Tests

Covers resolve-or-create idempotence and the (external_api_id, park_id)
uniqueness invariant.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import insert_attraction
from database.repositories.attraction_repository import AttractionRepository
from database.repositories.park_repository import ParkRepository
from models import Attraction


def _park_ids(session):
    repo = ParkRepository(session)
    return repo.get_by_external_id(1).id, repo.get_by_external_id(2).id


class TestResolveOrCreate:

    def test_first_call_creates(self, seeded_session_factory):
        session = seeded_session_factory()
        mk, _ = _park_ids(session)

        attraction, created = AttractionRepository(session).resolve_or_create(284, mk, "Space Mountain")
        session.commit()

        assert created is True
        assert attraction.id is not None
        assert attraction.is_active is True
        session.close()

    def test_repeated_calls_return_same_row(self, seeded_session_factory):
        """
        Given: the same (external_api_id, park_id) seen on three ticks
        Then: exactly one attraction row exists
        """
        ids = []
        for _ in range(3):
            session = seeded_session_factory()
            mk, _ = _park_ids(session)
            attraction, _ = AttractionRepository(session).resolve_or_create(284, mk, "Space Mountain")
            session.commit()
            ids.append(attraction.id)
            session.close()

        session = seeded_session_factory()
        assert len(set(ids)) == 1
        assert session.query(Attraction).count() == 1
        session.close()

    def test_same_external_id_in_different_parks_is_distinct(self, seeded_session_factory):
        session = seeded_session_factory()
        mk, epcot = _park_ids(session)
        repo = AttractionRepository(session)

        first, _ = repo.resolve_or_create(100, mk, "Ride A")
        second, created = repo.resolve_or_create(100, epcot, "Ride B")
        session.commit()

        assert created is True
        assert first.id != second.id
        session.close()

    def test_unique_constraint_rejects_duplicates(self, seeded_session_factory):
        session = seeded_session_factory()
        mk, _ = _park_ids(session)
        insert_attraction(session, mk, 284, "Space Mountain")

        with pytest.raises(IntegrityError):
            insert_attraction(session, mk, 284, "Space Mountain (copy)")

        session.rollback()
        session.close()


class TestActiveLookups:

    def test_get_active_by_park_skips_inactive(self, seeded_session_factory):
        session = seeded_session_factory()
        mk, _ = _park_ids(session)
        insert_attraction(session, mk, 1, "Astro Orbiter")
        insert_attraction(session, mk, 2, "Skyway", is_active=False)
        session.commit()

        names = [a.name for a in AttractionRepository(session).get_active_by_park(mk)]

        assert names == ["Astro Orbiter"]
        session.close()

    def test_get_active_with_park(self, seeded_session_factory):
        session = seeded_session_factory()
        mk, _ = _park_ids(session)
        attraction = insert_attraction(session, mk, 1, "Astro Orbiter")
        session.commit()

        found = AttractionRepository(session).get_active_with_park(attraction.id)

        assert found is not None
        assert found[1].abbreviation == "MK"
        session.close()

    def test_deactivate_hides_attraction(self, seeded_session_factory):
        session = seeded_session_factory()
        mk, _ = _park_ids(session)
        attraction = insert_attraction(session, mk, 1, "Astro Orbiter")
        repo = AttractionRepository(session)

        assert repo.deactivate(attraction.id) is True
        session.commit()

        assert repo.get_active_with_park(attraction.id) is None
        assert repo.get_by_id(attraction.id) is not None
        assert repo.deactivate(999999) is False
        session.close()
