# app/schemas/content.py
"""
Schemas for platform imports, manual content and transformations.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.models import SourceType


class PlatformImportRequest(BaseModel):
    """Request to import recent items from a platform."""

    source_type: SourceType
    access_token: str | None = Field(None, description="Overrides the stored credential for this service")
    channel_id: str | None = Field(None, description="YouTube channel id")
    site_url: str | None = Field(None, description="WordPress site URL")
    author_urn: str | None = Field(None, description="LinkedIn author URN")
    limit: int | None = Field(None, ge=1, le=100)


class ManualContentCreate(BaseModel):
    """A record entered by hand."""

    source_id: str = Field(..., min_length=1)
    title: str | None = None
    description: str | None = None
    content: str | None = None
    link: str | None = None
    author: str | None = None
    published_at: datetime | None = None
    thumbnail_url: str | None = None
    categories: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ExternalContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    source_type: str
    source_id: str
    title: str
    description: str
    content: str
    link: str
    published_at: datetime | None = None
    author: str
    thumbnail_url: str | None = None
    categories: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="content_metadata")
    ai_categories: list[str] = Field(default_factory=list)
    ai_summary: str = ""
    saved: bool
    transformed: bool


class TransformationCreate(BaseModel):
    original_content_id: uuid.UUID
    transformation_type: str = Field(..., min_length=1, max_length=64)
    result_data: Any = None
    settings: dict[str, Any] = Field(default_factory=dict)
    title: str = ""
    description: str = ""


class TransformationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    original_content_id: uuid.UUID
    transformation_type: str
    result_data: Any = None
    settings: dict[str, Any] = Field(default_factory=dict)
    title: str
    description: str
    created_at: datetime


class ApiCredentialCreate(BaseModel):
    service: SourceType
    api_key: str = Field(..., min_length=1)
