# app/services/transformations.py
"""
Derived artifacts (summaries, social posts, newsletters...) made from a
stored feed article or platform import.

Saving a transformation marks its origin record as transformed. The flag is
boolean and is never cleared, even if transformations are later removed.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from app import models
from app.services.content_store import store_errors

logger = logging.getLogger(__name__)


def find_origin(db: Session, user_id: str, content_id: uuid.UUID):
    """Return the feed article or external content with this id that belongs to the user."""
    with store_errors(db, f"Lookup of content {content_id}"):
        external = (
            db.query(models.ExternalContent)
            .filter(models.ExternalContent.id == content_id, models.ExternalContent.user_id == user_id)
            .first()
        )
        if external:
            return external
        return (
            db.query(models.FeedArticle)
            .join(models.Feed)
            .filter(models.FeedArticle.id == content_id, models.Feed.user_id == user_id)
            .first()
        )


def save_transformation(
    db: Session,
    user_id: str,
    original_content_id: uuid.UUID,
    transformation_type: str,
    result_data: Any,
    settings: dict | None = None,
    title: str = "",
    description: str = "",
) -> models.TransformedContent | None:
    """
    Store a transformation and flag its origin. Returns None if the origin does not exist.

    Raises:
        StoreError: the insert or flag update failed
    """
    origin = find_origin(db, user_id, original_content_id)
    if origin is None:
        return None

    with store_errors(db, f"Saving {transformation_type} transformation of {original_content_id}"):
        transformed = models.TransformedContent(
            user_id=user_id,
            original_content_id=original_content_id,
            transformation_type=transformation_type,
            result_data=result_data,
            settings=settings or {},
            title=title or "",
            description=description or "",
        )
        db.add(transformed)
        db.execute(
            update(type(origin))
            .where(type(origin).id == original_content_id)
            .values(transformed=True)
        )
        db.commit()
        db.refresh(transformed)

    logger.info(f"[TRANSFORM] Saved {transformation_type} for {original_content_id}")
    return transformed


def list_transformations(
    db: Session,
    user_id: str,
    original_content_id: uuid.UUID,
) -> list[models.TransformedContent]:
    """Transformations of one origin record, newest first."""
    with store_errors(db, f"Listing transformations of {original_content_id}"):
        return (
            db.query(models.TransformedContent)
            .filter(
                models.TransformedContent.original_content_id == original_content_id,
                models.TransformedContent.user_id == user_id,
            )
            .order_by(models.TransformedContent.created_at.desc())
            .all()
        )
