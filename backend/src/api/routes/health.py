"""
Theme Park Wait Watch - Health Check Endpoint
Provides API health status, database connectivity, and data freshness.
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from database.connection import session_scope
from database.repositories.wait_time_repository import WaitTimeRepository
from utils.config import STALE_CACHE_MINUTES
from utils.logger import logger

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON with API health status, database connectivity and the age of
        the newest cached wait time

    Response:
        200 OK: Database reachable (status may still be degraded)
        503 Service Unavailable: Database connection failed
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    health_data = {
        "status": "healthy",
        "timestamp": now.isoformat() + 'Z',
        "api_version": "1.0.0",
        "checks": {}
    }

    try:
        with session_scope(current_app.config['SESSION_FACTORY']) as session:
            session.execute(text("SELECT 1")).fetchone()
            health_data["checks"]["database"] = {
                "status": "healthy",
                "message": "Database connection successful"
            }

            last_fetch = WaitTimeRepository(session).newest_fetched_at()

    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)

        health_data["status"] = "unhealthy"
        health_data["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}"
        }

        return jsonify(health_data), 503

    if last_fetch:
        age_minutes = int((now - last_fetch.replace(tzinfo=None)).total_seconds() / 60)
        health_data["checks"]["wait_time_polling"] = {
            "status": "healthy" if age_minutes < STALE_CACHE_MINUTES else "stale",
            "last_fetch": last_fetch.isoformat() + 'Z',
            "age_minutes": age_minutes,
            "message": f"Last poll {age_minutes} minutes ago"
        }
    else:
        health_data["checks"]["wait_time_polling"] = {
            "status": "no_data",
            "message": "No wait times collected yet"
        }

    check_statuses = [check.get("status") for check in health_data["checks"].values()]
    if "stale" in check_statuses or "no_data" in check_statuses:
        health_data["status"] = "degraded"

    return jsonify(health_data), 200
