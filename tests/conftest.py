"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from shorting_urls.core.setting import Settings
from shorting_urls.db.repository import SQLUrlRepository
from shorting_urls.db.session import Database
from shorting_urls.main import create_app
from shorting_urls.services.url_service import URLShorteningService

TEST_BASE_URL = "http://short.test"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file, rate limiting off."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        BASE_URL=TEST_BASE_URL,
        RATE_LIMIT_ENABLED=False,
        AUTO_CREATE_TABLES=True,
    )


@pytest_asyncio.fixture
async def database(test_settings) -> AsyncGenerator[Database, None]:
    """Database with tables created, disposed after the test."""
    db = Database(test_settings.DATABASE_URL)
    await db.create_tables()

    yield db

    await db.dispose()


@pytest.fixture
def repository(database) -> SQLUrlRepository:
    return SQLUrlRepository(database)


@pytest.fixture
def url_service(repository) -> URLShorteningService:
    return URLShorteningService(repository, base_url=TEST_BASE_URL)


@pytest.fixture
def client(test_settings):
    """TestClient running the full lifespan (engine created and disposed)."""
    app = create_app(test_settings)
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
