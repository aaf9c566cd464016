# app/services/deduper.py
"""
Natural-key deduplication for content records.

Dedupe rules:
1. Feed articles are identified by (feed_id, guid); guid falls back to the link
2. Platform imports are identified by (user_id, source_type, source_id)

Lookups are advisory (they let the orchestrator skip classification for
known items). The unique constraints on those keys are what make the
upsert atomic.
"""

import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.exceptions import StoreError
from app.services.normalizer import ContentRecord


class Deduper:
    """Deduplication service."""

    @staticmethod
    def feed_article_key(feed_id: uuid.UUID, record: ContentRecord) -> tuple[uuid.UUID, str]:
        guid = record.source_id or record.link
        return feed_id, guid

    @staticmethod
    def external_content_key(user_id: str, record: ContentRecord) -> tuple[str, str, str]:
        return user_id, record.source_type, record.source_id

    def find_feed_article(
        self,
        db: Session,
        feed_id: uuid.UUID,
        record: ContentRecord,
    ) -> models.FeedArticle | None:
        """
        Return the stored article with the record's natural key, if any.

        Raises:
            StoreError: the lookup failed
        """
        feed_id, guid = self.feed_article_key(feed_id, record)
        try:
            return (
                db.query(models.FeedArticle)
                .filter(
                    models.FeedArticle.feed_id == feed_id,
                    models.FeedArticle.guid == guid,
                )
                .first()
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Dedup lookup failed for {guid}: {e}") from e

    def find_external_content(
        self,
        db: Session,
        user_id: str,
        record: ContentRecord,
    ) -> models.ExternalContent | None:
        user_id, source_type, source_id = self.external_content_key(user_id, record)
        try:
            return (
                db.query(models.ExternalContent)
                .filter(
                    models.ExternalContent.user_id == user_id,
                    models.ExternalContent.source_type == source_type,
                    models.ExternalContent.source_id == source_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Dedup lookup failed for {source_type}:{source_id}: {e}") from e
