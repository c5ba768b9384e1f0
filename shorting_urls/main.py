"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, security headers, CORS, rate limiting)
- Error handlers answering {"error": "<message>"}
- Startup/shutdown of the database engine and the service wiring

Design Decisions:
- create_app() builds a fresh application from explicit Settings
- The Database is created in the lifespan, passed to the store and disposed
  on shutdown; build_url_service() is the only place components are wired
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from shorting_urls import __version__
from shorting_urls.api import endpoints
from shorting_urls.api.schemas import HealthResponse
from shorting_urls.core.exceptions import ShortCodeNotFoundError
from shorting_urls.core.logging_config import configure_logging
from shorting_urls.core.rate_limit import limiter
from shorting_urls.core.setting import Settings, settings as default_settings
from shorting_urls.db.repository import SQLUrlRepository
from shorting_urls.db.session import Database
from shorting_urls.middleware.headers import add_security_headers_middleware
from shorting_urls.middleware.logging import add_logging_middleware
from shorting_urls.middleware.rate_limit import add_rate_limit_middleware
from shorting_urls.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)


def build_url_service(database: Database, app_settings: Settings) -> URLShorteningService:
    """Wire the store and the service on top of an owned Database."""
    repository = SQLUrlRepository(database)
    return URLShorteningService(
        repository,
        base_url=app_settings.BASE_URL,
        code_length=app_settings.SHORT_CODE_LENGTH,
        max_attempts=app_settings.MAX_GENERATION_ATTEMPTS,
    )


async def short_code_not_found_handler(request: Request, exc: ShortCodeNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Short URL not found"})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Routing failures (unknown path or method) all read as a missing route
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment-loaded ones)

    Returns:
        Configured FastAPI instance; the database is opened when its
        lifespan starts
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(app_settings.DATABASE_URL, echo=app_settings.DATABASE_ECHO)
        if app_settings.AUTO_CREATE_TABLES:
            await database.create_tables()

        app.state.database = database
        app.state.url_service = build_url_service(database, app_settings)
        logger.info(f"URL shortener started (base URL {app_settings.BASE_URL})")
        try:
            yield
        finally:
            logger.info("URL shortener shutting down")
            await database.dispose()

    app = FastAPI(
        title="URL Shortener Service",
        description="Shorten long URLs, redirect short codes and count clicks",
        version=__version__,
        docs_url="/docs",  # Swagger UI documentation
        redoc_url="/redoc",  # ReDoc documentation
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.state.settings = app_settings

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(ShortCodeNotFoundError, short_code_not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    add_rate_limit_middleware(app, app_settings)
    add_logging_middleware(app)
    add_security_headers_middleware(app, hsts=app_settings.is_production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoint defined before router to match before catch-all route
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())

    app.include_router(endpoints.router, tags=["URL Shortener"])

    return app


def run() -> None:
    """Configure logging and serve the app with uvicorn."""
    import uvicorn

    configure_logging(default_settings.LOG_LEVEL, json_format=default_settings.LOG_JSON)
    uvicorn.run(
        "shorting_urls.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_config=None,  # keep the handler installed by configure_logging()
    )


app = create_app()
