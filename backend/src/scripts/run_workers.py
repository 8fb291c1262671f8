#!/usr/bin/env python3
"""
Theme Park Wait Watch - Background Workers
Starts the wait time poller and the notification engine on their own
schedules and blocks until interrupted.

Usage:
    python -m scripts.run_workers
"""

import sys
from pathlib import Path

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from collector.queue_times_client import get_queue_times_client
from database.connection import db, get_session_factory
from notifications.notification_engine import NotificationEngine
from notifications.push_dispatcher import get_push_dispatcher
from processor.scheduler import WorkerScheduler
from processor.wait_time_poller import WaitTimePoller
from utils.logger import logger


def build_scheduler(blocking: bool = True) -> WorkerScheduler:
    session_factory = get_session_factory()
    poller = WaitTimePoller(get_queue_times_client(), session_factory)
    engine = NotificationEngine(session_factory, get_push_dispatcher())
    return WorkerScheduler(poller, engine, blocking=blocking)


def main():
    """Main entry point."""
    if not db.test_connection():
        logger.error("Database unreachable, workers not started")
        sys.exit(1)

    workers = build_scheduler()
    try:
        workers.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutdown requested")
    finally:
        workers.stop()


if __name__ == '__main__':
    main()
