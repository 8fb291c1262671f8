#!/usr/bin/env python3
"""
Theme Park Wait Watch - One-shot Wait Time Poll
Runs a single poll tick over the configured source parks.

Intended for cron; the long-running worker is scripts/run_workers.py.

Usage:
    python -m scripts.poll_wait_times
    python -m scripts.poll_wait_times --parks 1,2

Exit codes:
    0 - at least one source park polled
    1 - every source park failed
"""

import argparse
import sys
from pathlib import Path

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from collector.queue_times_client import get_queue_times_client
from database.connection import get_session_factory
from processor.wait_time_poller import WaitTimePoller
from utils.config import POLL_MAX_WORKERS
from utils.logger import logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Poll Queue-Times.com once")
    parser.add_argument('--parks', type=str, default=None,
                        help="Comma-separated Queue-Times park IDs (default: SOURCE_PARK_IDS)")
    parser.add_argument('--workers', type=int, default=POLL_MAX_WORKERS,
                        help="Concurrent park fetches")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    park_ids = [int(p) for p in args.parks.split(',')] if args.parks else None

    poller = WaitTimePoller(
        get_queue_times_client(),
        get_session_factory(),
        park_ids=park_ids,
        max_workers=args.workers
    )
    result = poller.run_tick()

    if result.all_sources_failed:
        logger.error("Every source park failed", extra={
            "errors": [error.message for error in result.errors]
        })
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
