#!/usr/bin/env python3
"""
Theme Park Wait Watch - Database Initialization
Creates all tables from the ORM metadata and seeds the source parks.

Safe to run repeatedly: existing tables and parks are left alone.

Usage:
    python -m scripts.init_db
"""

import sys
from pathlib import Path

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from database.connection import db, session_scope
from database.repositories.park_repository import ParkRepository
from models import Base
from utils.logger import logger


def init_db(database=db) -> int:
    """
    Create tables and seed parks.

    Returns:
        Number of parks created
    """
    engine = database.get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database tables created", extra={
        "tables": sorted(Base.metadata.tables.keys())
    })

    with session_scope(database.get_session_factory()) as session:
        created = ParkRepository(session).seed()

    logger.info(f"Seeded {created} parks")
    return created


def main():
    """Main entry point."""
    init_db()


if __name__ == '__main__':
    main()
