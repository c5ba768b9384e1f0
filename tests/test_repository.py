"""Tests for the SQL-backed URL store."""

from datetime import datetime, timedelta, timezone

import pytest

from shorting_urls.core.exceptions import ShortCodeConflictError
from shorting_urls.db.adapters import PostgreSQLAdapter, SQLiteAdapter, get_database_adapter
from shorting_urls.db.models import Url


class TestCreate:

    @pytest.mark.asyncio
    async def test_defaults(self, repository):
        url = await repository.create("https://example.com", "abc")

        assert url.id
        assert url.short_code == "abc"
        assert url.long_url == "https://example.com"
        assert url.clicks == 0
        assert url.created_at is not None
        assert url.updated_at is not None

    @pytest.mark.asyncio
    async def test_ids_are_distinct(self, repository):
        first = await repository.create("https://example.com", "one")
        second = await repository.create("https://example.com", "two")

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_unique_short_code(self, repository):
        await repository.create("https://example.com", "abc")

        with pytest.raises(ShortCodeConflictError) as exc_info:
            await repository.create("https://other.example.com", "abc")

        assert exc_info.value.short_code == "abc"
        assert len(await repository.find_all()) == 1


class TestLookup:

    @pytest.mark.asyncio
    async def test_find_by_short_code(self, repository):
        await repository.create("https://example.com", "abc")

        url = await repository.find_by_short_code("abc")

        assert url is not None
        assert url.long_url == "https://example.com"

    @pytest.mark.asyncio
    async def test_absent_is_none(self, repository):
        assert await repository.find_by_short_code("missing") is None

    @pytest.mark.asyncio
    async def test_find_all_newest_first(self, repository, database):
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        async with database.session() as session:
            for offset, code in [(1, "middle"), (0, "oldest"), (2, "newest")]:
                created = start + timedelta(minutes=offset)
                session.add(Url(
                    short_code=code,
                    long_url=f"https://example.com/{code}",
                    created_at=created,
                    updated_at=created,
                ))

        urls = await repository.find_all()

        assert [url.short_code for url in urls] == ["newest", "middle", "oldest"]

    @pytest.mark.asyncio
    async def test_find_all_empty(self, repository):
        assert await repository.find_all() == []


class TestIncrementClicks:

    @pytest.mark.asyncio
    async def test_increments_and_touches_updated_at(self, repository, database):
        long_ago = datetime(2020, 1, 1, tzinfo=timezone.utc)
        async with database.session() as session:
            session.add(Url(short_code="abc", long_url="https://example.com",
                            created_at=long_ago, updated_at=long_ago))

        await repository.increment_clicks("abc")
        await repository.increment_clicks("abc")

        url = await repository.find_by_short_code("abc")
        assert url.clicks == 2
        assert url.updated_at.replace(tzinfo=None) > long_ago.replace(tzinfo=None)
        assert url.created_at.replace(tzinfo=None) == long_ago.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_unknown_code_is_silent(self, repository):
        await repository.create("https://example.com", "abc")

        await repository.increment_clicks("missing")

        assert (await repository.find_by_short_code("abc")).clicks == 0


class TestAdapters:

    def test_sqlite(self):
        assert isinstance(get_database_adapter("sqlite+aiosqlite:///./x.db"), SQLiteAdapter)

    def test_postgresql(self):
        adapter = get_database_adapter("postgresql+asyncpg://user:pw@localhost/db")
        assert isinstance(adapter, PostgreSQLAdapter)
        assert adapter.get_engine_kwargs()["pool_pre_ping"] is True

    def test_unsupported(self):
        with pytest.raises(ValueError):
            get_database_adapter("mysql+aiomysql://user:pw@localhost/db")
