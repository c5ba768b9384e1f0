"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.

Key Features:
- Database abstraction: the adapter configures the engine per backend
- Explicit ownership: a Database is constructed at startup, handed to the
  store, and disposed at shutdown; nothing is created at import time
- Async session management: proper async context management
- Error handling: automatic rollback on exceptions
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from shorting_urls.db import models  # noqa: F401  registers the tables on SQLModel.metadata
from shorting_urls.db.adapters import get_database_adapter

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the async engine (and therefore the connection pool) of the process.

    Usage:
        database = Database(settings.DATABASE_URL)
        await database.create_tables()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.adapter = get_database_adapter(database_url)
        self.engine: AsyncEngine = self.adapter.create_engine(database_url, echo=echo)

        # expire_on_commit=False keeps returned rows readable after commit
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session that commits on success and rolls back on any exception.
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create missing tables (development/test convenience, migrations own production)."""
        async with self.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured on %s", self.adapter.get_dialect_name())

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
