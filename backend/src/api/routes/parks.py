"""
Theme Park Wait Watch - Parks API Routes

GET /parks                       → all source parks
GET /parks/<id>/attractions      → active attractions with their latest wait time
"""

from flask import Blueprint, current_app, jsonify

from database.connection import session_scope
from database.repositories.attraction_repository import AttractionRepository
from database.repositories.park_repository import ParkRepository
from database.repositories.wait_time_repository import WaitTimeRepository

parks_bp = Blueprint('parks', __name__)


@parks_bp.route('/parks', methods=['GET'])
def get_parks():
    """List all parks, ordered by name."""
    with session_scope(current_app.config['SESSION_FACTORY']) as session:
        parks = [park.to_dict() for park in ParkRepository(session).get_all()]

    return jsonify({
        "success": True,
        "data": parks,
        "count": len(parks)
    }), 200


@parks_bp.route('/parks/<int:park_id>/attractions', methods=['GET'])
def get_park_attractions(park_id: int):
    """
    Get active attractions for a park with current wait times.

    Attractions that have never been sampled are listed with null
    wait_minutes/status/trend/fetched_at.

    Path Parameters:
        park_id (int): Internal park ID
    """
    with session_scope(current_app.config['SESSION_FACTORY']) as session:
        wait_repo = WaitTimeRepository(session)
        attractions = []
        for attraction in AttractionRepository(session).get_active_by_park(park_id):
            latest = wait_repo.latest(attraction.id)
            attractions.append({
                "id": attraction.id,
                "name": attraction.name,
                "external_api_id": attraction.external_api_id,
                **_sample_fields(latest)
            })

    return jsonify({
        "success": True,
        "data": attractions,
        "count": len(attractions)
    }), 200


def _sample_fields(sample) -> dict:
    if sample is None:
        return {"wait_minutes": None, "status": None, "trend": None, "fetched_at": None}
    return {
        "wait_minutes": sample.wait_minutes,
        "status": sample.status,
        "trend": sample.trend,
        "fetched_at": sample.fetched_at.isoformat() + 'Z' if sample.fetched_at else None
    }
