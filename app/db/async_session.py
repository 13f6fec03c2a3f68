from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, AsyncIterator
import logging
import time

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.base_class import Base

logger = logging.getLogger(__name__)


class AsyncDatabaseManager:
    """
    Manages async database connections and sessions.

    One manager is created per application instance and kept on
    ``app.state.db_manager``; request handlers reach it through the
    ``get_async_db`` dependency, never through module-level state.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.async_engine = None
        self.async_session_factory = None
        self._is_initialized = False
        self._initialize_engine()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def _initialize_engine(self):
        """Initialize the async database engine."""
        try:
            logger.info(f"Initializing async database engine with URL: {self.database_url[:50]}...")

            engine_kwargs = {"echo": self.echo}
            if not self.is_sqlite:
                engine_kwargs["pool_pre_ping"] = True

            self.async_engine = create_async_engine(self.database_url, **engine_kwargs)

            if self.is_sqlite:
                self._setup_sqlite_pragmas()

            self.async_session_factory = async_sessionmaker(
                bind=self.async_engine,
                class_=AsyncSession,
                expire_on_commit=False,  # Keep objects accessible after commit
                autoflush=False,
            )

            self._is_initialized = True
            logger.info("Async database engine initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize async database engine: {e}")
            raise

    def _setup_sqlite_pragmas(self):
        """SQLite only enforces foreign keys (and ON DELETE CASCADE) when asked to, per connection."""

        @event.listens_for(self.async_engine.sync_engine, "connect")
        def on_connect(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
            logger.debug("New database connection established (foreign keys on)")

    async def create_tables(self):
        """Create all tables known to the declarative Base."""
        import app.models  # noqa: F401

        async with self.async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables are set up")

    @asynccontextmanager
    async def get_async_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get an async database session with proper lifecycle management.

        Yields:
            AsyncSession: Database session for async operations

        Raises:
            RuntimeError: If the database manager is not initialized
        """
        if not self._is_initialized:
            raise RuntimeError("AsyncDatabaseManager is not initialized")

        async with self.async_session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error in session: {e}")
                raise
            except Exception:
                await session.rollback()
                raise

    async def test_connection(self) -> bool:
        """
        Test the database connection.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            async with self.async_session_factory() as session:
                await session.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    async def close(self):
        """Dispose of the engine and all pooled connections."""
        if self.async_engine:
            try:
                await self.async_engine.dispose()
                logger.info("Async database engine disposed successfully")
            except Exception as e:
                logger.error(f"Error disposing async database engine: {e}")
            finally:
                self._is_initialized = False
                self.async_engine = None
                self.async_session_factory = None


# Async dependency injection function for FastAPI
async def get_async_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection.

    The session comes from the manager owned by the running application,
    so every app instance (and every test) talks to its own database.
    """
    manager: AsyncDatabaseManager = request.app.state.db_manager
    async with manager.get_async_session() as session:
        yield session


async def check_async_database_health(manager: AsyncDatabaseManager) -> dict:
    """
    Perform a basic health check of the database connection.

    Returns:
        dict: Health check results with status and details
    """
    start = time.perf_counter()
    connection_test = await manager.test_connection()
    elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

    return {
        "status": "healthy" if connection_test else "unhealthy",
        "database": "connected" if connection_test else "disconnected",
        "response_time_ms": elapsed_ms,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
