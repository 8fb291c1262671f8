"""
Theme Park Wait Watch - Error Handler Middleware
JSON error bodies for the read-only API.

Every error response has the same shape as a failed data response:

    {"success": false, "error": "<message>"}

Routes raise werkzeug HTTP exceptions (``abort(404, description=...)``)
and the description becomes the message; otherwise a short default per
status code is used.
"""

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from utils.logger import logger


DEFAULT_MESSAGES = {
    400: "Bad request",
    404: "Not found",
    405: "Method not allowed: this API is read-only",
    500: "Internal server error",
}


def _error_response(status_code: int, message: str):
    return jsonify({
        "success": False,
        "error": message
    }), status_code


def _message_for(error: HTTPException) -> str:
    # Werkzeug's class-level descriptions are long prose; only keep one a route passed in
    if error.description and error.description != type(error).description:
        return error.description
    return DEFAULT_MESSAGES.get(error.code, error.name)


def register_error_handlers(app: Flask):
    """
    Register error handlers for Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        status_code = error.code or 500
        if status_code >= 500:
            logger.error(f"HTTP {status_code}: {error}")
        else:
            logger.info(f"HTTP {status_code}: {error.name}")
        return _error_response(status_code, _message_for(error))

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """Unhandled exceptions never leak their details to the client."""
        logger.error(f"Unexpected error: {error}", exc_info=True)
        return _error_response(500, DEFAULT_MESSAGES[500])
