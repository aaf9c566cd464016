# app/schemas/feeds.py
"""
Schemas for feeds and feed articles.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# -----------------------------------------------------------------------------
# Feeds
# -----------------------------------------------------------------------------


class FeedCreate(BaseModel):
    """Request to register a feed."""

    url: str = Field(..., min_length=1, description="RSS, Atom or JSON Feed URL")
    title: str | None = Field(None, description="Display title (default: the feed's own title)")
    category: str | None = Field(None, max_length=128)


class FeedCategoryUpdate(BaseModel):
    category: str | None = Field(None, max_length=128)


class FeedCategoryCreate(BaseModel):
    """Request to add a named feed category."""

    name: str = Field(..., min_length=1, max_length=128)
    color: str | None = Field(None, max_length=32)


class FeedCategoryRename(BaseModel):
    """Rename a category; feeds filed under the old name follow it."""

    name: str = Field(..., min_length=1, max_length=128)
    color: str | None = Field(None, max_length=32, description="New color (default: keep the current one)")


class FeedCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    color: str | None = None
    created_at: datetime


class FeedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    url: str
    title: str
    category: str | None = None
    last_fetched_at: datetime | None = None
    created_at: datetime


class CuratedFeed(BaseModel):
    title: str
    url: str
    description: str


class CuratedCategory(BaseModel):
    category: str
    feeds: list[CuratedFeed]


# -----------------------------------------------------------------------------
# Articles
# -----------------------------------------------------------------------------


class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    feed_id: uuid.UUID
    guid: str
    title: str
    description: str
    content: str
    link: str
    published_at: datetime | None = None
    author: str
    thumbnail_url: str | None = None
    categories: list[str] = Field(default_factory=list)
    ai_categories: list[str] = Field(default_factory=list)
    ai_summary: str = ""
    read: bool
    saved: bool
    transformed: bool
    full_content_fetched: bool


class ArticleSavedUpdate(BaseModel):
    saved: bool


class ArticleReadUpdate(BaseModel):
    read: bool = True


class FullContentResponse(BaseModel):
    article_id: str
    content_length: int
    extractor_used: str | None = None


# -----------------------------------------------------------------------------
# Ingestion results
# -----------------------------------------------------------------------------


class IngestResultResponse(BaseModel):
    """Counts from ingesting one source."""

    model_config = ConfigDict(from_attributes=True)

    source_id: str
    source_title: str
    added_count: int
    updated_count: int
    skipped_count: int
    error_count: int
    errors: list[str] = Field(default_factory=list)


class FeedAddResponse(BaseModel):
    feed: FeedResponse
    ingest: IngestResultResponse | None = None
