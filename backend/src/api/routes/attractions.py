"""
Theme Park Wait Watch - Attractions API Routes
"""

from flask import Blueprint, abort, current_app, jsonify

from api.routes.parks import _sample_fields
from database.connection import session_scope
from database.repositories.attraction_repository import AttractionRepository
from database.repositories.wait_time_repository import WaitTimeRepository

attractions_bp = Blueprint('attractions', __name__)


@attractions_bp.route('/attractions/<int:attraction_id>', methods=['GET'])
def get_attraction(attraction_id: int):
    """
    Get a single attraction with its park and latest wait time.

    Returns:
        404 if the attraction does not exist or has been deactivated
    """
    with session_scope(current_app.config['SESSION_FACTORY']) as session:
        found = AttractionRepository(session).get_active_with_park(attraction_id)
        if found is None:
            data = None
        else:
            data = _attraction_fields(session, *found)

    if data is None:
        abort(404, description="Attraction not found")

    return jsonify({
        "success": True,
        "data": data
    }), 200


def _attraction_fields(session, attraction, park) -> dict:
    latest = WaitTimeRepository(session).latest(attraction.id)
    return {
        "id": attraction.id,
        "name": attraction.name,
        "external_api_id": attraction.external_api_id,
        "park_id": park.id,
        "park_name": park.name,
        "park_abbreviation": park.abbreviation,
        **_sample_fields(latest)
    }
