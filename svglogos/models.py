"""Database models using SQLModel."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


class LogoSearch(SQLModel, table=True):
    """
    One row per lookup attempt recorded by the internal logo repository.

    Found rows point at a stored SVG (object_url) and carry the
    fingerprints used for deduplication. Not-found rows are telemetry.
    """

    __tablename__ = "logo_searches"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    search_term: str = Field(index=True, description="Normalized term key")
    file_name: str = Field(default="", description="Object key in the bucket ('' when not found)")
    source: str = Field(max_length=100, description="Source id the SVG came from, or 'none'")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    logo_found: bool = Field(default=False, index=True)
    object_url: Optional[str] = Field(default=None, description="Public URL of the stored SVG")
    content_hash: Optional[str] = Field(
        default=None, max_length=64, index=True,
        description="SHA-256 of normalized markup"
    )
    visual_signature: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Element counts + colour set",
    )
