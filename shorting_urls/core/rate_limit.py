"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints, read from the Settings of the
  app serving the request (see RateLimitSettingsMiddleware)
- IP-based limiting
"""

from contextvars import ContextVar, Token
from typing import Callable

from slowapi import Limiter
from slowapi.util import get_remote_address

from shorting_urls.core.setting import Settings, settings

# Initialize rate limiter
# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address)

# Settings of the app handling the current request
_active_settings: ContextVar[Settings] = ContextVar("rate_limit_settings", default=settings)


def use_settings(app_settings: Settings) -> Token:
    """Make `app_settings` drive the limits of the current request."""
    return _active_settings.set(app_settings)


def reset_settings(token: Token) -> None:
    _active_settings.reset(token)


def limit_for(setting_name: str) -> Callable[[], str]:
    """Build a slowapi limit provider resolved on every request."""

    def provider() -> str:
        return getattr(_active_settings.get(), setting_name)

    return provider


def rate_limiting_disabled() -> bool:
    return not _active_settings.get().RATE_LIMIT_ENABLED


# Rate limit configurations per endpoint
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "shorten": limit_for("RATE_LIMIT_SHORTEN"),  # URL creation per IP
    "redirect": limit_for("RATE_LIMIT_REDIRECT"),  # Redirects per IP
    "stats": limit_for("RATE_LIMIT_STATS"),  # Stats and listing per IP
}
