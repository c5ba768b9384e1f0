"""
URL Store

Persistence operations for the `urls` table behind an abstract interface, so
the service layer depends on UrlRepository and never on SQLAlchemy directly.

Design Decisions:
- One session (one transaction) per operation
- Uniqueness is enforced by the unique index; a violation becomes
  ShortCodeConflictError instead of a silent duplicate
- Click increments are a single UPDATE evaluated by the database (atomic)
- Every other SQLAlchemy failure is wrapped in DatabaseError
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from shorting_urls.core.exceptions import DatabaseError, ShortCodeConflictError
from shorting_urls.db.models import Url, utcnow
from shorting_urls.db.session import Database

logger = logging.getLogger(__name__)


class UrlRepository(ABC):
    """Contract of the URL store."""

    @abstractmethod
    async def create(self, long_url: str, short_code: str) -> Url:
        """
        Persist a new record.

        Raises:
            ShortCodeConflictError: If short_code is already stored
            DatabaseError: On any other persistence failure
        """

    @abstractmethod
    async def find_by_short_code(self, short_code: str) -> Optional[Url]:
        """Point lookup; None when the code is unknown."""

    @abstractmethod
    async def increment_clicks(self, short_code: str) -> None:
        """
        Add one click and refresh updated_at.

        The caller is expected to have checked that the code exists; an
        unknown code updates nothing and does not raise.
        """

    @abstractmethod
    async def find_all(self) -> List[Url]:
        """All records, newest first."""


class SQLUrlRepository(UrlRepository):
    """UrlRepository backed by the SQLAlchemy async engine of a Database."""

    def __init__(self, database: Database):
        self.database = database

    async def create(self, long_url: str, short_code: str) -> Url:
        url = Url(long_url=long_url, short_code=short_code)
        try:
            async with self.database.session() as session:
                session.add(url)
                await session.flush()
                await session.refresh(url)
        except IntegrityError as e:
            logger.info(f"Unique constraint rejected short code '{short_code}'")
            raise ShortCodeConflictError(short_code, original_error=e) from e
        except SQLAlchemyError as e:
            raise DatabaseError("failed to create short URL", original_error=e) from e
        return url

    async def find_by_short_code(self, short_code: str) -> Optional[Url]:
        statement = select(Url).where(Url.short_code == short_code)
        try:
            async with self.database.session() as session:
                result = await session.exec(statement)
                return result.first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"failed to look up '{short_code}'", original_error=e) from e

    async def increment_clicks(self, short_code: str) -> None:
        # Use database-level UPDATE for atomic increment
        statement = (
            update(Url)
            .where(Url.short_code == short_code)
            .values(clicks=Url.clicks + 1, updated_at=utcnow())
        )
        try:
            async with self.database.session() as session:
                await session.execute(statement)
        except SQLAlchemyError as e:
            raise DatabaseError(f"failed to count click for '{short_code}'", original_error=e) from e

    async def find_all(self) -> List[Url]:
        statement = select(Url).order_by(Url.created_at.desc())
        try:
            async with self.database.session() as session:
                result = await session.exec(statement)
                return list(result.all())
        except SQLAlchemyError as e:
            raise DatabaseError("failed to list short URLs", original_error=e) from e
