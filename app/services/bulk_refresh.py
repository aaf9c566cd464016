# app/services/bulk_refresh.py
"""
Bulk refresh of every registered feed.

All feeds are refreshed concurrently. Each refresh runs on its own database
session and converts any failure into a per-feed result, so one failing feed
never affects its siblings. The driver awaits every refresh before it
returns a summary.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field

from sqlalchemy.orm import sessionmaker

from app.database import get_session_factory
from app.exceptions import StoreError
from app.logging_config import log_stage
from app.services.content_store import ContentStore
from app.services.ingestion import IngestionService

logger = logging.getLogger(__name__)

NO_FEEDS_MESSAGE = "No feeds to refresh"


@dataclass
class SourceRefreshResult:
    """Outcome of refreshing one feed."""
    feed_id: str
    feed_title: str
    success: bool
    items_processed: int = 0
    items_added: int = 0
    items_skipped: int = 0
    items_with_errors: int = 0
    error: str | None = None


@dataclass
class RefreshAllResult:
    """Summary of one bulk refresh run."""
    total_sources: int = 0
    successful_sources: int = 0
    failed_sources: int = 0
    per_source_results: list[SourceRefreshResult] = field(default_factory=list)
    success: bool = True
    message: str | None = None
    error: str | None = None
    trace_id: str | None = None


class BulkRefreshDriver:
    """
    Refresh every registered feed concurrently.

    Usage:
        driver = BulkRefreshDriver()
        summary = await driver.refresh_all()
    """

    def __init__(
        self,
        ingestion: IngestionService | None = None,
        session_factory: sessionmaker | None = None,
        store: ContentStore | None = None,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.ingestion = ingestion or IngestionService(session_factory=self.session_factory)
        self.store = store or ContentStore()

    async def refresh_all(self) -> RefreshAllResult:
        """Never raises; a failure to list feeds comes back as a failed summary."""
        trace_id = str(uuid.uuid4())

        try:
            feeds = self._list_feeds()
        except StoreError as e:
            logger.error(f"[REFRESH] Could not list feeds: {e}")
            return RefreshAllResult(success=False, error=str(e), trace_id=trace_id)

        if not feeds:
            logger.info(f"[REFRESH] {NO_FEEDS_MESSAGE}")
            return RefreshAllResult(message=NO_FEEDS_MESSAGE, trace_id=trace_id)

        with log_stage("refresh_all", trace_id=trace_id):
            results = await asyncio.gather(
                *(self._refresh_one(feed_id, feed_title) for feed_id, feed_title in feeds)
            )

        summary = RefreshAllResult(
            total_sources=len(results),
            successful_sources=sum(1 for r in results if r.success),
            failed_sources=sum(1 for r in results if not r.success),
            per_source_results=list(results),
            trace_id=trace_id,
        )
        logger.info(
            f"[REFRESH] {summary.successful_sources}/{summary.total_sources} feeds refreshed, "
            f"{summary.failed_sources} failed"
        )
        return summary

    def _list_feeds(self) -> list[tuple[uuid.UUID, str]]:
        db = self.session_factory()
        try:
            return [(feed.id, feed.title) for feed in self.store.list_feeds(db)]
        finally:
            db.close()

    async def _refresh_one(self, feed_id: uuid.UUID, feed_title: str) -> SourceRefreshResult:
        try:
            outcome = await self.ingestion.ingest_feed(feed_id)
        except Exception as e:
            # Any failure of one feed is reported in its own result
            logger.warning(f"[REFRESH] Feed '{feed_title}' ({feed_id}) failed: {e}")
            return SourceRefreshResult(
                feed_id=str(feed_id),
                feed_title=feed_title,
                success=False,
                error=str(e) or type(e).__name__,
            )

        return SourceRefreshResult(
            feed_id=str(feed_id),
            feed_title=feed_title,
            success=True,
            items_processed=outcome.processed_count,
            items_added=outcome.added_count,
            items_skipped=outcome.skipped_count,
            items_with_errors=outcome.error_count,
        )
