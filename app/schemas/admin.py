# app/schemas/admin.py
"""
Schemas for admin maintenance endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, Field

# -----------------------------------------------------------------------------
# Refresh
# -----------------------------------------------------------------------------


class SourceRefreshResponse(BaseModel):
    """Result for a single feed."""

    feed_id: str
    feed_title: str
    success: bool
    items_processed: int = 0
    items_added: int = 0
    items_skipped: int = 0
    items_with_errors: int = 0
    error: str | None = None


class RefreshAllResponse(BaseModel):
    """Summary of a bulk refresh run."""

    total_sources: int
    successful_sources: int
    failed_sources: int
    per_source_results: list[SourceRefreshResponse] = Field(default_factory=list)
    message: str | None = None
    trace_id: str | None = None


# -----------------------------------------------------------------------------
# Retention
# -----------------------------------------------------------------------------


class CleanupRequest(BaseModel):
    days: int | None = Field(None, ge=0, description="Age threshold in days (default: RETENTION_DAYS)")
    dry_run: bool = False


class CleanupResponse(BaseModel):
    dry_run: bool
    days: int
    threshold: datetime
    articles_matched: int
    articles_deleted: int
    message: str
