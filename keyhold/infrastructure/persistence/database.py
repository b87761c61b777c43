"""Database connection and session management.

Wraps SQLAlchemy's async engine and session factory. Sessions are created
with AuditedSession as their sync session class, so every flush passes
through the audit interceptor.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from keyhold.infrastructure.persistence.audit_interceptor import AuditedSession
from keyhold.infrastructure.persistence.base import BaseModel


class Database:
    """Database connection and session management.

    Usage:
        db = Database("sqlite+aiosqlite:///./keyhold.db")
        async with db.get_session() as session:
            # Commits on success, rolls back on error
            ...
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """Initialize database with connection parameters.

        Args:
            database_url: Async database URL (postgresql+asyncpg://...,
                sqlite+aiosqlite://...).
            echo: If True, log all SQL statements.
        """
        engine_kwargs: dict[str, object] = {"echo": echo}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # One shared connection, otherwise every session sees an empty database.
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        elif not database_url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            sync_session_class=AuditedSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional database session.

        Commits on successful exit, rolls back on exception, always closes.

        Yields:
            AsyncSession: Database session for operations.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_all(self) -> None:
        """Create all tables defined in the models (no migrations are shipped)."""
        # Import models so they register on the metadata.
        from keyhold.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables. Only use for testing."""
        from keyhold.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of all pooled connections (application shutdown)."""
        await self.engine.dispose()

    async def check_connection(self) -> bool:
        """Run ``SELECT 1``; used by the health endpoint."""
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
                return True
        except (SQLAlchemyError, OSError):
            return False
