"""
Theme Park Wait Watch - Structured Logging
Provides JSON-formatted logging for CloudWatch Logs Insights queries.
"""

import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Poll completed", extra={
        ...     "park_count": 4,
        ...     "attractions_processed": 212
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.hasHandlers():
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('waitwatch')


def log_poll_start(park_count: int):
    """Log the start of a wait time poll tick."""
    logger.info("Wait time poll started", extra={
        "event_type": "poll_start",
        "park_count": park_count,
        "environment": config.environment
    })


def log_poll_complete(duration_seconds: float, parks_processed: int,
                      attractions_processed: int, error_count: int):
    """Log poll tick completion."""
    logger.info("Wait time poll completed", extra={
        "event_type": "poll_complete",
        "duration_seconds": duration_seconds,
        "parks_processed": parks_processed,
        "attractions_processed": attractions_processed,
        "error_count": error_count
    })


def log_source_error(error: Exception, park_id: Optional[int] = None):
    """Log a per-source fetch failure (non-fatal)."""
    logger.error("Source fetch failed", extra={
        "event_type": "source_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "park_id": park_id
    })


def log_evaluation_complete(duration_seconds: float, users_evaluated: int,
                            notifications_sent: int, failure_count: int):
    """Log notification evaluation tick completion."""
    logger.info("Notification evaluation completed", extra={
        "event_type": "evaluation_complete",
        "duration_seconds": duration_seconds,
        "users_evaluated": users_evaluated,
        "notifications_sent": notifications_sent,
        "failure_count": failure_count
    })


def log_dispatch_error(error: Exception, user_id: int, attraction_id: Optional[int] = None):
    """Log a push dispatch failure for one user/preference."""
    logger.error("Push dispatch failed", extra={
        "event_type": "dispatch_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "user_id": user_id,
        "attraction_id": attraction_id
    })


def log_database_error(error: Exception, query_context: str = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)
