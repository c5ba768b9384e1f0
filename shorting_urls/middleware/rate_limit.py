"""Bind the app's Settings to each request for the rate limiter."""

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from shorting_urls.core.rate_limit import reset_settings, use_settings
from shorting_urls.core.setting import Settings


class RateLimitSettingsMiddleware(BaseHTTPMiddleware):
    """Resolve rate limits from the Settings the app was built with."""

    def __init__(self, app, app_settings: Settings):
        super().__init__(app)
        self.app_settings = app_settings

    async def dispatch(self, request: Request, call_next):
        token = use_settings(self.app_settings)
        try:
            return await call_next(request)
        finally:
            reset_settings(token)


def add_rate_limit_middleware(app: FastAPI, app_settings: Settings) -> None:
    app.add_middleware(RateLimitSettingsMiddleware, app_settings=app_settings)
