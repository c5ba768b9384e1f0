"""
Database Adapters

Concrete DatabaseAdapter implementations and the factory that picks one from
the connection string.

SQLite is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

PostgreSQL is the production target: a real connection pool sized for
concurrent requests, with pre-ping to drop dead connections.
"""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool

from shorting_urls.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    SQLite uses file-based storage and has different characteristics than
    server-based databases like PostgreSQL.
    """

    def get_pool_class(self) -> type[NullPool]:
        """
        Get the connection pool class for SQLite.

        SQLite uses NullPool because:
        - File-based database doesn't benefit from connection pooling
        - SQLite handles one writer at a time (file locking)

        Returns:
            NullPool class
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {}

    def get_dialect_name(self) -> str:
        return "sqlite"


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL (asyncpg) adapter with a bounded QueuePool."""

    def __init__(self, pool_size: int = 5, max_overflow: int = 10):
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> None:
        # The async engine's default pool is already the right one
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "pool_pre_ping": True,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": 30,
            "pool_recycle": 1800,
        }

    def get_dialect_name(self) -> str:
        return "postgresql"


ADAPTERS = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgreSQLAdapter,
}


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Args:
        database_url: SQLAlchemy URL, e.g. sqlite+aiosqlite:///./app.db

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If the URL names an unsupported backend
    """
    backend = make_url(database_url).get_backend_name()
    try:
        adapter_class = ADAPTERS[backend]
    except KeyError:
        raise ValueError(f"Unsupported database backend: '{backend}'") from None
    return adapter_class()
