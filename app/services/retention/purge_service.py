# app/services/retention/purge_service.py
"""
Purge service for old feed articles.

Deletes feed articles published more than N days ago that the user has
neither saved nor transformed. Platform imports are saved by definition and
are never purged. Articles without a published date are kept.

This is a maintenance operation; the ingestion pipeline never calls it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import FeedArticle
from app.services.content_store import store_errors

logger = logging.getLogger(__name__)


@dataclass
class PurgeResult:
    """Result of a purge operation."""

    dry_run: bool = False
    days: int = 0
    threshold: datetime | None = None
    articles_matched: int = 0
    articles_deleted: int = 0

    @property
    def message(self) -> str:
        if self.dry_run:
            return f"Found {self.articles_matched} articles older than {self.days} days that would be deleted"
        return f"Deleted {self.articles_deleted} articles older than {self.days} days"


def _purgeable(threshold: datetime):
    return (
        FeedArticle.published_at < threshold,
        FeedArticle.saved == False,  # noqa: E712
        FeedArticle.transformed == False,  # noqa: E712
    )


def purge_old_articles(
    db: Session,
    days: int | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
) -> PurgeResult:
    """
    Delete (or with dry_run, count) unsaved, untransformed feed articles older than `days`.

    Raises:
        StoreError: the count or delete failed
    """
    days = days if days is not None else get_settings().RETENTION_DAYS
    if days < 0:
        raise ValueError("days must be non-negative")

    threshold = (now or datetime.utcnow()) - timedelta(days=days)
    result = PurgeResult(dry_run=dry_run, days=days, threshold=threshold)

    with store_errors(db, "Counting purgeable articles"):
        result.articles_matched = db.execute(
            select(func.count()).select_from(FeedArticle).where(*_purgeable(threshold))
        ).scalar_one()

    if dry_run:
        logger.info(f"[RETENTION] Dry run: {result.articles_matched} articles older than {days} days")
        return result

    with store_errors(db, "Purging old articles"):
        deleted = db.execute(delete(FeedArticle).where(*_purgeable(threshold)))
        db.commit()
        result.articles_deleted = deleted.rowcount

    logger.info(f"[RETENTION] Deleted {result.articles_deleted} articles older than {days} days")
    return result
