"""
Theme Park Wait Watch - Flask API Application
Read-only API over parks, attractions and cached wait times.
"""

from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from database.connection import SessionFactory, new_session
from utils.config import FLASK_ENV, FLASK_DEBUG, SECRET_KEY
from utils.logger import logger
from api.routes.health import health_bp
from api.routes.parks import parks_bp
from api.routes.attractions import attractions_bp
from api.middleware.error_handler import register_error_handlers


def create_app(session_factory: Optional[SessionFactory] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        session_factory: Session factory for request handlers (defaults to
            the production database)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Configuration
    app.config['ENV'] = FLASK_ENV
    app.config['DEBUG'] = FLASK_DEBUG
    app.config['SECRET_KEY'] = SECRET_KEY
    app.config['JSON_SORT_KEYS'] = False  # Preserve JSON key order
    app.config['SESSION_FACTORY'] = session_factory or new_session

    # CORS configuration
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })

    # Register blueprints
    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(parks_bp, url_prefix='/api')
    app.register_blueprint(attractions_bp, url_prefix='/api')

    # Register error handlers
    register_error_handlers(app)

    logger.info(f"Flask app created (env={FLASK_ENV}, debug={FLASK_DEBUG})")

    # Root endpoint
    @app.route('/')
    def index():
        """Root endpoint with API information."""
        return jsonify({
            "name": "Theme Park Wait Watch API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "health": "/api/health",
                "parks": "/api/parks",
                "park_attractions": "/api/parks/<park_id>/attractions",
                "attraction": "/api/attractions/<attraction_id>"
            }
        })

    return app


if __name__ == '__main__':
    # Development server
    app = create_app()
    app.run(
        host='0.0.0.0',
        port=5000,
        debug=FLASK_DEBUG
    )
