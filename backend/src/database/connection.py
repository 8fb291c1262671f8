"""
Theme Park Wait Watch - Database Connection Management
Provides the SQLAlchemy engine and ORM session factory.

Components never reach for a global session: they receive a session factory
(anything callable that returns a Session) in their constructor. The
helpers here build the production factory.
"""

from contextlib import contextmanager
from sqlalchemy import create_engine, text
from sqlalchemy.pool import QueuePool
from sqlalchemy.engine import Engine, URL
from sqlalchemy.orm import Session, sessionmaker
from typing import Callable, Generator, Optional

from utils.config import (
    DATABASE_URL, DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD,
    DB_POOL_SIZE, DB_POOL_MAX_OVERFLOW, DB_POOL_RECYCLE, DB_POOL_PRE_PING,
    config
)
from utils.logger import logger, log_database_error


SessionFactory = Callable[[], Session]


class DatabaseConnection:
    """
    Manages database connections with connection pooling.

    Features:
    - MySQL via PyMySQL by default, any SQLAlchemy URL via DATABASE_URL
    - Connection pooling (10 connections + 20 overflow) for server databases
    - Automatic connection recycling (every hour)
    - Health checks before connection use (pool_pre_ping)
    """

    def __init__(self, url: Optional[str] = None):
        self._url = url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def _build_engine(self) -> Engine:
        url = self._url or DATABASE_URL
        if url:
            if url.startswith('sqlite'):
                # Poller worker threads share the file database
                return create_engine(
                    url,
                    connect_args={"check_same_thread": False},
                    echo=False,
                )
            return create_engine(
                url,
                pool_pre_ping=DB_POOL_PRE_PING,
                pool_recycle=DB_POOL_RECYCLE,
                echo=False,
                hide_parameters=True,
            )

        # URL.create() keeps the password out of logs and reprs
        connection_url = URL.create(
            drivername="mysql+pymysql",
            username=DB_USER,
            password=DB_PASSWORD,
            host=DB_HOST,
            port=DB_PORT,
            database=DB_NAME,
            query={
                "charset": "utf8mb4",
                "init_command": "SET time_zone='+00:00'",  # Force UTC for all connections
            },
        )
        return create_engine(
            connection_url,
            poolclass=QueuePool,
            pool_size=DB_POOL_SIZE,
            max_overflow=DB_POOL_MAX_OVERFLOW,
            pool_recycle=DB_POOL_RECYCLE,
            pool_pre_ping=DB_POOL_PRE_PING,
            echo=False,
            hide_parameters=True,
        )

    def get_engine(self) -> Engine:
        """
        Get or create the SQLAlchemy engine.

        Raises:
            DatabaseConnectionError: If the engine cannot be created
        """
        if self._engine is None:
            try:
                self._engine = self._build_engine()
                logger.info("Database engine initialized", extra={
                    "environment": config.environment
                })
            except Exception as e:
                log_database_error(e, "Failed to create database engine")
                raise DatabaseConnectionError(f"Failed to create database engine: {e}")

        return self._engine

    def get_session_factory(self) -> sessionmaker:
        """Session factory bound to this engine (expire_on_commit disabled)."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(),
                expire_on_commit=False,
                autoflush=True,
            )
        return self._session_factory

    def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.get_engine().connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection test successful")
            return True
        except Exception as e:
            logger.error("Database connection test failed", extra={
                "error": str(e)
            })
            return False

    def close(self):
        """Close all connections in the pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection pool closed")


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass


class PersistenceError(Exception):
    """
    Raised when a store read or write fails.

    Aborts processing of the affected attraction only; the surrounding tick
    carries on with the next entry.
    """
    pass


# Global database connection instance (used by scripts and the Flask app)
db = DatabaseConnection()


def get_session_factory() -> sessionmaker:
    """Production session factory for engines and scripts."""
    return db.get_session_factory()


@contextmanager
def session_scope(session_factory: SessionFactory) -> Generator[Session, None, None]:
    """
    Transactional scope around a series of operations.

    Commits on success, rolls back and re-raises on error.

    Example:
        >>> with session_scope(get_session_factory()) as session:
        ...     repo = ParkRepository(session)
        ...     parks = repo.get_all()
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        log_database_error(e, "ORM transaction failed, rolled back")
        raise
    finally:
        session.close()


def new_session() -> Session:
    """Open a session on the production database (a SessionFactory)."""
    return get_session_factory()()


def get_db_session():
    """Context manager for an ORM session from the production factory."""
    return session_scope(get_session_factory())


def test_database_connection() -> bool:
    return db.test_connection()
