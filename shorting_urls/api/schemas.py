"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Wire names are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing attributes under camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ShortenRequest(CamelModel):
    """
    Request model for URL shortening endpoint.

    longUrl is optional here so that a missing value is answered with the
    service's own 400 message rather than a schema error.
    """
    long_url: Optional[str] = Field(None, description="The long URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional caller-chosen short code")


class ShortenResponse(CamelModel):
    """Response model for URL shortening endpoint."""
    short_url: str = Field(..., description="The complete short URL")
    long_url: str = Field(..., description="The original long URL")
    short_code: str = Field(..., description="The assigned short code")


class UrlResponse(CamelModel):
    """A stored short URL with its statistics."""
    id: str
    short_code: str
    long_url: str
    clicks: int
    created_at: datetime
    updated_at: datetime


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Body of every error answered by the service."""
    error: str
