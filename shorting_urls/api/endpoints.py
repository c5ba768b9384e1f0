"""
FastAPI Endpoints for URL Shortener Service

This module defines the REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation
- Rate limiting
- Error handling and HTTP responses
- Delegating to the service layer

Every error is answered here as {"error": "<message>"}; internal details of
store failures only go to the logs.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from shorting_urls.api.schemas import ErrorResponse, ShortenRequest, ShortenResponse, UrlResponse
from shorting_urls.core.exceptions import (
    DuplicateCodeError,
    GenerationExhaustedError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeNotFoundError,
)
from shorting_urls.core.rate_limit import RATE_LIMITS, limiter, rate_limiting_disabled
from shorting_urls.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_url_service(request: Request) -> URLShorteningService:
    """Dependency returning the service wired at startup."""
    return request.app.state.url_service


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def internal_error(action: str, error: Exception) -> JSONResponse:
    logger.error(f"Failed to {action}: {error}", exc_info=error)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@router.post(
    "/api/urls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create a short URL",
    description="Takes a long URL (and optionally a custom code) and returns its short URL"
)
@limiter.limit(RATE_LIMITS["shorten"], exempt_when=rate_limiting_disabled)
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: ShortenRequest,
    url_service: URLShorteningService = Depends(get_url_service)
) -> Union[ShortenResponse, JSONResponse]:
    """
    Create a new short URL from a long URL.

    Returns:
        ShortenResponse with shortUrl, longUrl and shortCode
    """
    if not body.long_url:
        return error_response(status.HTTP_400_BAD_REQUEST, "longUrl is required")

    try:
        result = await url_service.create_short_url(body.long_url, body.custom_code)
    except InvalidURLError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid URL provided")
    except InvalidShortCodeError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, f"Invalid custom code: {e.reason}")
    except DuplicateCodeError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Custom code already exists")
    except GenerationExhaustedError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Failed to generate unique short code")
    except Exception as e:
        return internal_error("create short URL", e)

    return ShortenResponse(
        short_url=result.short_url,
        long_url=result.long_url,
        short_code=result.short_code
    )


@router.get(
    "/api/urls",
    response_model=List[UrlResponse],
    responses=ERROR_RESPONSES,
    summary="List short URLs",
    description="Returns every short URL with its statistics, newest first"
)
@limiter.limit(RATE_LIMITS["stats"], exempt_when=rate_limiting_disabled)
async def list_urls(
    request: Request,
    url_service: URLShorteningService = Depends(get_url_service)
) -> Union[List[UrlResponse], JSONResponse]:
    try:
        urls = await url_service.list_all()
    except Exception as e:
        return internal_error("list short URLs", e)

    return [UrlResponse.model_validate(url) for url in urls]


@router.get(
    "/api/urls/{short_code}/stats",
    response_model=UrlResponse,
    responses=ERROR_RESPONSES,
    summary="Get URL statistics",
    description="Returns the stored record of a short URL including its click count"
)
@limiter.limit(RATE_LIMITS["stats"], exempt_when=rate_limiting_disabled)
async def get_url_stats(
    short_code: str,
    request: Request,
    url_service: URLShorteningService = Depends(get_url_service)
) -> Union[UrlResponse, JSONResponse]:
    """
    Get statistics for a short URL.

    Raises:
        ShortCodeNotFoundError: If short code not found (answered with 404)
    """
    short_code = short_code.strip()
    if not short_code:
        return error_response(status.HTTP_400_BAD_REQUEST, "shortCode is required")

    try:
        url = await url_service.get_stats(short_code)
    except Exception as e:
        return internal_error(f"get stats for '{short_code}'", e)

    if not url:
        raise ShortCodeNotFoundError(short_code)

    return UrlResponse.model_validate(url)


@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    response_model=None,
    responses=ERROR_RESPONSES,
    summary="Redirect to original URL",
    description="Takes a short code, counts the click and redirects to the original long URL"
)
@limiter.limit(RATE_LIMITS["redirect"], exempt_when=rate_limiting_disabled)
async def redirect_to_url(
    short_code: str,
    request: Request,
    url_service: URLShorteningService = Depends(get_url_service)
) -> Union[RedirectResponse, JSONResponse]:
    """
    Redirect to the original URL for a given short code.

    Returns:
        RedirectResponse (HTTP 302) to original URL

    Raises:
        ShortCodeNotFoundError: If short code not found (answered with 404)
    """
    short_code = short_code.strip()
    if not short_code:
        return error_response(status.HTTP_400_BAD_REQUEST, "shortCode is required")

    try:
        long_url = await url_service.resolve(short_code)
    except Exception as e:
        return internal_error(f"resolve '{short_code}'", e)

    if not long_url:
        raise ShortCodeNotFoundError(short_code)

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
