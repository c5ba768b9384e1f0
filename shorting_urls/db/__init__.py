"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: backend-specific engine configuration
- Database: the process-owned engine and session factory
- UrlRepository: the URL store contract and its SQL implementation
"""

from shorting_urls.db.interface import DatabaseAdapter
from shorting_urls.db.session import Database
from shorting_urls.db.repository import SQLUrlRepository, UrlRepository

__all__ = [
    "DatabaseAdapter",
    "Database",
    "SQLUrlRepository",
    "UrlRepository",
]
