"""
Database Models for URL Shortener Service

This module defines the SQLModel schema for the single `urls` table that maps
short codes to long URLs and carries their click counters.

Design Decisions:
- Opaque string primary key (UUID4 hex), never exposed as a short code
- Unique index on short_code: the store's only uniqueness guarantee
- Index on created_at for the newest-first listing
- clicks denormalized on the row, updated with an atomic UPDATE
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlmodel import Column, Field, SQLModel

SHORT_CODE_MAX_LENGTH = 64


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class Url(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - id: Opaque primary key
    - short_code: Unique short code used as the redirect key
    - long_url: The URL exactly as submitted
    - clicks: Successful redirects so far (never decreases)
    - created_at: Set once when the row is inserted
    - updated_at: Refreshed on every mutation (click increments)
    """
    __tablename__ = "urls"

    id: Optional[str] = Field(
        default_factory=new_id,
        sa_column=Column(String(32), primary_key=True)
    )
    short_code: str = Field(
        sa_column=Column(String(SHORT_CODE_MAX_LENGTH), nullable=False, unique=True, index=True),
        max_length=SHORT_CODE_MAX_LENGTH
    )
    long_url: str = Field(sa_column=Column(Text, nullable=False))
    clicks: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0")
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
