# app/services/content_store.py
"""
Backing-store operations for feeds and content records.

Upserts are atomic on the natural key: a dialect-specific
INSERT ... ON CONFLICT DO NOTHING RETURNING id either creates the row or
returns nothing, in which case only the classification fields and
last_updated_at of the existing row are refreshed. User state (read, saved,
transformed) and stored content are never written by an upsert.

Every write commits. Any SQLAlchemyError is rolled back and re-raised as
StoreError.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.exceptions import StoreError
from app.services.deduper import Deduper
from app.services.normalizer import ContentRecord

logger = logging.getLogger(__name__)

ADDED = "added"
UPDATED = "updated"


@dataclass
class UpsertOutcome:
    id: uuid.UUID
    action: str  # "added" or "updated"

    @property
    def created(self) -> bool:
        return self.action == ADDED


@contextmanager
def store_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and convert driver/ORM failures into StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[STORE] {action} failed: {e}")
        raise StoreError(f"{action} failed: {e}") from e


def _insert_for(db: Session, model):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)
    raise StoreError(f"Upsert is not supported on the {dialect} dialect")


class ContentStore:
    """Persistence for feeds, feed articles, platform imports and credentials."""

    def __init__(self, deduper: Deduper | None = None):
        self.deduper = deduper or Deduper()

    # -------------------------------------------------------------------------
    # Upserts
    # -------------------------------------------------------------------------

    def upsert_feed_article(self, db: Session, feed_id: uuid.UUID, record: ContentRecord) -> UpsertOutcome:
        """Insert a new feed article (saved=False) or refresh classification on the existing one."""
        feed_id, guid = self.deduper.feed_article_key(feed_id, record)
        now = datetime.utcnow()
        values = {
            "id": uuid.uuid4(),
            "feed_id": feed_id,
            "guid": guid,
            "title": record.title,
            "description": record.description,
            "content": record.content,
            "link": record.link,
            "published_at": record.published_at,
            "author": record.author,
            "thumbnail_url": record.thumbnail_url,
            "categories": list(record.categories),
            "ai_categories": list(record.ai_categories),
            "ai_summary": record.ai_summary,
            "read": False,
            "saved": False,
            "transformed": False,
            "full_content_fetched": False,
            "created_at": now,
            "last_updated_at": now,
        }

        with store_errors(db, f"Upsert of feed article {guid}"):
            stmt = (
                _insert_for(db, models.FeedArticle.__table__)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["feed_id", "guid"])
                .returning(models.FeedArticle.__table__.c.id)
            )
            inserted_id = db.execute(stmt).scalar_one_or_none()
            if inserted_id is not None:
                db.commit()
                return UpsertOutcome(id=inserted_id, action=ADDED)

            existing_id = db.execute(
                update(models.FeedArticle.__table__)
                .where(models.FeedArticle.feed_id == feed_id, models.FeedArticle.guid == guid)
                .values(**self._classification_values(record, now))
                .returning(models.FeedArticle.__table__.c.id)
            ).scalar_one()
            db.commit()
            return UpsertOutcome(id=existing_id, action=UPDATED)

    def upsert_external_content(self, db: Session, user_id: str, record: ContentRecord) -> UpsertOutcome:
        """Insert a new platform import (saved=True) or refresh classification on the existing one."""
        user_id, source_type, source_id = self.deduper.external_content_key(user_id, record)
        now = datetime.utcnow()
        values = {
            "id": uuid.uuid4(),
            "user_id": user_id,
            "source_type": source_type,
            "source_id": source_id,
            "title": record.title,
            "description": record.description,
            "content": record.content,
            "link": record.link,
            "published_at": record.published_at,
            "author": record.author,
            "thumbnail_url": record.thumbnail_url,
            "categories": list(record.categories),
            "metadata": dict(record.metadata),
            "ai_categories": list(record.ai_categories),
            "ai_summary": record.ai_summary,
            "saved": True,
            "transformed": False,
            "created_at": now,
            "last_updated_at": now,
        }

        with store_errors(db, f"Upsert of {source_type} content {source_id}"):
            stmt = (
                _insert_for(db, models.ExternalContent.__table__)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["user_id", "source_type", "source_id"])
                .returning(models.ExternalContent.__table__.c.id)
            )
            inserted_id = db.execute(stmt).scalar_one_or_none()
            if inserted_id is not None:
                db.commit()
                return UpsertOutcome(id=inserted_id, action=ADDED)

            existing_id = db.execute(
                update(models.ExternalContent.__table__)
                .where(
                    models.ExternalContent.user_id == user_id,
                    models.ExternalContent.source_type == source_type,
                    models.ExternalContent.source_id == source_id,
                )
                .values(**self._classification_values(record, now))
                .returning(models.ExternalContent.__table__.c.id)
            ).scalar_one()
            db.commit()
            return UpsertOutcome(id=existing_id, action=UPDATED)

    @staticmethod
    def _classification_values(record: ContentRecord, now: datetime) -> dict:
        # A failed or skipped classification leaves the stored values alone
        values = {"last_updated_at": now}
        if record.ai_categories or record.ai_summary:
            values["ai_categories"] = list(record.ai_categories)
            values["ai_summary"] = record.ai_summary
        return values

    # -------------------------------------------------------------------------
    # Feeds
    # -------------------------------------------------------------------------

    def get_feed(self, db: Session, feed_id: uuid.UUID, user_id: str | None = None) -> models.Feed | None:
        with store_errors(db, f"Lookup of feed {feed_id}"):
            query = db.query(models.Feed).filter(models.Feed.id == feed_id)
            if user_id is not None:
                query = query.filter(models.Feed.user_id == user_id)
            return query.first()

    def get_feed_by_url(self, db: Session, user_id: str, url: str) -> models.Feed | None:
        with store_errors(db, f"Lookup of feed {url}"):
            return (
                db.query(models.Feed)
                .filter(models.Feed.user_id == user_id, models.Feed.url == url)
                .first()
            )

    def list_feeds(self, db: Session, user_id: str | None = None) -> list[models.Feed]:
        """All feeds, or one user's feeds, oldest first."""
        with store_errors(db, "Listing feeds"):
            query = db.query(models.Feed)
            if user_id is not None:
                query = query.filter(models.Feed.user_id == user_id)
            return query.order_by(models.Feed.created_at.asc()).all()

    def add_feed(
        self,
        db: Session,
        user_id: str,
        url: str,
        title: str,
        category: str | None = None,
    ) -> models.Feed:
        with store_errors(db, f"Adding feed {url}"):
            feed = models.Feed(user_id=user_id, url=url, title=title or "Untitled Feed", category=category)
            db.add(feed)
            db.commit()
            db.refresh(feed)
            return feed

    def delete_feed(self, db: Session, user_id: str, feed_id: uuid.UUID) -> bool:
        """Delete a feed and its articles. Returns False if the feed does not exist."""
        with store_errors(db, f"Deleting feed {feed_id}"):
            feed = (
                db.query(models.Feed)
                .filter(models.Feed.id == feed_id, models.Feed.user_id == user_id)
                .first()
            )
            if not feed:
                return False
            db.delete(feed)
            db.commit()
            return True

    def update_feed_category(
        self,
        db: Session,
        user_id: str,
        feed_id: uuid.UUID,
        category: str | None,
    ) -> models.Feed | None:
        with store_errors(db, f"Updating category of feed {feed_id}"):
            feed = (
                db.query(models.Feed)
                .filter(models.Feed.id == feed_id, models.Feed.user_id == user_id)
                .first()
            )
            if not feed:
                return None
            feed.category = category
            db.commit()
            db.refresh(feed)
            return feed

    # -------------------------------------------------------------------------
    # Feed categories
    # -------------------------------------------------------------------------

    def list_feed_categories(self, db: Session, user_id: str) -> list[models.FeedCategory]:
        """A user's categories, alphabetically."""
        with store_errors(db, f"Listing feed categories for user {user_id}"):
            return (
                db.query(models.FeedCategory)
                .filter(models.FeedCategory.user_id == user_id)
                .order_by(models.FeedCategory.name.asc())
                .all()
            )

    def get_feed_category_by_name(self, db: Session, user_id: str, name: str) -> models.FeedCategory | None:
        with store_errors(db, f"Lookup of feed category {name}"):
            return (
                db.query(models.FeedCategory)
                .filter(models.FeedCategory.user_id == user_id, models.FeedCategory.name == name)
                .first()
            )

    def add_feed_category(
        self,
        db: Session,
        user_id: str,
        name: str,
        color: str | None = None,
    ) -> models.FeedCategory:
        """
        Raises:
            StoreError: the insert failed, including a duplicate name for this user
        """
        with store_errors(db, f"Adding feed category {name}"):
            category = models.FeedCategory(user_id=user_id, name=name, color=color)
            db.add(category)
            db.commit()
            db.refresh(category)
            return category

    def rename_feed_category(
        self,
        db: Session,
        user_id: str,
        category_id: uuid.UUID,
        name: str,
        color: str | None = None,
    ) -> models.FeedCategory | None:
        """
        Rename a category (and recolor it if a color is given).

        Feeds of this user filed under the old name move to the new one in the
        same transaction. Returns None if the category does not exist.
        """
        with store_errors(db, f"Renaming feed category {category_id}"):
            category = (
                db.query(models.FeedCategory)
                .filter(models.FeedCategory.id == category_id, models.FeedCategory.user_id == user_id)
                .first()
            )
            if not category:
                return None

            old_name = category.name
            category.name = name
            if color:
                category.color = color

            moved = 0
            if old_name != name:
                moved = db.execute(
                    update(models.Feed)
                    .where(models.Feed.user_id == user_id, models.Feed.category == old_name)
                    .values(category=name)
                ).rowcount
            db.commit()
            db.refresh(category)

        logger.info(f"[STORE] Renamed feed category '{old_name}' to '{name}' ({moved} feeds moved)")
        return category

    def touch_feed(self, db: Session, feed_id: uuid.UUID, when: datetime | None = None) -> None:
        """Record that a refresh attempt of this feed completed."""
        with store_errors(db, f"Updating last_fetched_at of feed {feed_id}"):
            db.execute(
                update(models.Feed)
                .where(models.Feed.id == feed_id)
                .values(last_fetched_at=when or datetime.utcnow())
            )
            db.commit()

    # -------------------------------------------------------------------------
    # Feed articles
    # -------------------------------------------------------------------------

    def get_feed_article(self, db: Session, article_id: uuid.UUID, user_id: str | None = None) -> models.FeedArticle | None:
        with store_errors(db, f"Lookup of article {article_id}"):
            query = db.query(models.FeedArticle).filter(models.FeedArticle.id == article_id)
            if user_id is not None:
                query = query.join(models.Feed).filter(models.Feed.user_id == user_id)
            return query.first()

    def list_feed_articles(
        self,
        db: Session,
        feed_id: uuid.UUID,
        limit: int = 20,
        offset: int = 0,
    ) -> list[models.FeedArticle]:
        """A feed's articles, newest first."""
        with store_errors(db, f"Listing articles of feed {feed_id}"):
            return (
                db.query(models.FeedArticle)
                .filter(models.FeedArticle.feed_id == feed_id)
                .order_by(models.FeedArticle.published_at.desc().nulls_last(), models.FeedArticle.created_at.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

    def list_user_articles(
        self,
        db: Session,
        user_id: str,
        category: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[models.FeedArticle]:
        """Articles across all of a user's feeds, optionally limited to one feed category."""
        with store_errors(db, f"Listing articles for user {user_id}"):
            query = (
                db.query(models.FeedArticle)
                .join(models.Feed)
                .filter(models.Feed.user_id == user_id)
            )
            if category:
                query = query.filter(models.Feed.category == category)
            return (
                query.order_by(models.FeedArticle.published_at.desc().nulls_last(), models.FeedArticle.created_at.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

    def set_article_read(self, db: Session, user_id: str, article_id: uuid.UUID, read: bool = True) -> models.FeedArticle | None:
        article = self.get_feed_article(db, article_id, user_id=user_id)
        if not article:
            return None
        with store_errors(db, f"Marking article {article_id} read={read}"):
            article.read = read
            db.commit()
            db.refresh(article)
            return article

    def set_article_saved(self, db: Session, user_id: str, article_id: uuid.UUID, saved: bool) -> models.FeedArticle | None:
        article = self.get_feed_article(db, article_id, user_id=user_id)
        if not article:
            return None
        with store_errors(db, f"Marking article {article_id} saved={saved}"):
            article.saved = saved
            db.commit()
            db.refresh(article)
            return article

    def set_article_full_content(self, db: Session, article: models.FeedArticle, content: str) -> models.FeedArticle:
        with store_errors(db, f"Storing full content of article {article.id}"):
            article.content = content
            article.full_content_fetched = True
            article.last_updated_at = datetime.utcnow()
            db.commit()
            db.refresh(article)
            return article

    # -------------------------------------------------------------------------
    # External content
    # -------------------------------------------------------------------------

    def get_external_content(self, db: Session, content_id: uuid.UUID, user_id: str | None = None) -> models.ExternalContent | None:
        with store_errors(db, f"Lookup of content {content_id}"):
            query = db.query(models.ExternalContent).filter(models.ExternalContent.id == content_id)
            if user_id is not None:
                query = query.filter(models.ExternalContent.user_id == user_id)
            return query.first()

    def list_external_content(
        self,
        db: Session,
        user_id: str,
        source_type: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[models.ExternalContent]:
        with store_errors(db, f"Listing content for user {user_id}"):
            query = db.query(models.ExternalContent).filter(models.ExternalContent.user_id == user_id)
            if source_type:
                query = query.filter(models.ExternalContent.source_type == source_type)
            return (
                query.order_by(models.ExternalContent.published_at.desc().nulls_last(), models.ExternalContent.created_at.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    def get_api_credential(self, db: Session, user_id: str, service: str) -> str | None:
        with store_errors(db, f"Lookup of {service} credential"):
            credential = (
                db.query(models.ApiCredential)
                .filter(models.ApiCredential.user_id == user_id, models.ApiCredential.service == service)
                .first()
            )
            return credential.api_key if credential else None

    def set_api_credential(self, db: Session, user_id: str, service: str, api_key: str) -> models.ApiCredential:
        with store_errors(db, f"Storing {service} credential"):
            credential = (
                db.query(models.ApiCredential)
                .filter(models.ApiCredential.user_id == user_id, models.ApiCredential.service == service)
                .first()
            )
            if credential:
                credential.api_key = api_key
            else:
                credential = models.ApiCredential(user_id=user_id, service=service, api_key=api_key)
                db.add(credential)
            db.commit()
            db.refresh(credential)
            return credential
