"""
Wallit Users — Database Handle and Session Management
======================================================

What:  The `Database` storage handle (async engine + session factory), the
       declarative Base, and the per-request session dependency.
How:   `create_app()` builds one Database and stores it on `app.state`; route
       handlers receive sessions through `get_db_session`, which commits on
       success and rolls back on error.

Connection Pooling:
    Server databases get a QueuePool sized from settings (pool_size,
    max_overflow, pool_pre_ping, pool_recycle=3600). SQLite URLs (used by the
    test suite) keep SQLAlchemy's default pool, which rejects sizing options.
"""

import logging
from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from wallit.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic and `Database.create_all` read.
    """
    pass


class Database:
    """
    Explicit storage handle owning the engine and its connection pool.

    Constructed once at startup and injected; nothing in the package keeps a
    global engine.

    Usage:
        database = Database.from_settings(settings)
        async with database.session_factory() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, **engine_options: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_options)
        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle using the URL and pool options from settings."""
        url = settings.sqlalchemy_url
        options: dict = {
            "pool_pre_ping": settings.db_pool_pre_ping,
            "echo": settings.log_level == "DEBUG",
        }
        if not url.startswith("sqlite"):
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=3600,
            )
        return cls(url, **options)

    async def create_all(self) -> None:
        """
        Create missing tables from the ORM metadata.

        Existing tables are left untouched; this never drops anything.
        """
        # Models register themselves on Base.metadata when imported
        from wallit.models import user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created (tables: %s)", ", ".join(Base.metadata.tables))

    async def ping(self) -> bool:
        """Run SELECT 1; True when the database answered."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        """Close all pooled connections (called on application shutdown)."""
        await self.engine.dispose()

def migration_url(settings: Settings, override: Optional[str] = None) -> str:
    """
    URL Alembic should migrate.

    `alembic -x url=...` wins over settings, so a one-off upgrade can target
    another database without touching the environment. Percent signs are
    doubled for Alembic's ConfigParser interpolation.
    """
    url = override or settings.sqlalchemy_url
    return url.replace("%", "%%")


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns the connection to the pool)

    Example usage in a route:
        @router.get("/users")
        async def find(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
