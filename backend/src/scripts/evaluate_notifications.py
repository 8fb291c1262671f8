#!/usr/bin/env python3
"""
Theme Park Wait Watch - One-shot Notification Evaluation
Evaluates every user's preferences once and sends due push notifications.

Usage:
    python -m scripts.evaluate_notifications
"""

import argparse
import sys
from pathlib import Path

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from database.connection import get_session_factory
from notifications.notification_engine import NotificationEngine
from notifications.push_dispatcher import get_push_dispatcher
from utils.config import NOTIFICATION_MAX_WORKERS


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Evaluate notification preferences once")
    parser.add_argument('--workers', type=int, default=NOTIFICATION_MAX_WORKERS,
                        help="Users evaluated concurrently")
    args = parser.parse_args(argv)

    engine = NotificationEngine(
        get_session_factory(),
        get_push_dispatcher(),
        max_workers=args.workers
    )
    engine.run_tick()
    return 0


if __name__ == '__main__':
    sys.exit(main())
