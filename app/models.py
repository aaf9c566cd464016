# app/models.py
"""
Content Collector Database Models

Tables:
- Feed: RSS/Atom/JSON feed registrations, owned by a user
- FeedCategory: Named, optionally colored feed categories, per user
- FeedArticle: Items ingested from a feed, unique per (feed_id, guid)
- ExternalContent: Platform imports, unique per (user_id, source_type, source_id)
- TransformedContent: Derived artifacts linked to an origin record
- ApiCredential: Stored platform access tokens per user/service
"""

from datetime import datetime
from enum import Enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.database import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class SourceType(str, Enum):
    """Where a content record came from."""
    WORDPRESS = "wordpress"
    YOUTUBE = "youtube"
    LINKEDIN = "linkedin"
    FACEBOOK = "facebook"
    RSS = "rss"
    MANUAL = "manual"


# Platforms that authenticate with a stored credential
CREDENTIAL_SERVICES = {
    SourceType.YOUTUBE.value,
    SourceType.LINKEDIN.value,
    SourceType.FACEBOOK.value,
}


# -----------------------------------------------------------------------------
# Feed
# -----------------------------------------------------------------------------

class Feed(Base):
    """RSS source registration."""
    __tablename__ = "rss_feeds"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    url = Column(Text, nullable=False)
    title = Column(Text, nullable=False, default="Untitled Feed")
    category = Column(String(128), nullable=True)
    # Updated after every completed refresh attempt, regardless of item outcomes
    last_fetched_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    articles = relationship(
        "FeedArticle",
        back_populates="feed",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "url", name="uq_rss_feeds_user_url"),
        Index("ix_rss_feeds_user_id", "user_id"),
    )


# -----------------------------------------------------------------------------
# FeedCategory
# -----------------------------------------------------------------------------

class FeedCategory(Base):
    """
    A user's named feed category.

    Feeds refer to a category by name (Feed.category), so renaming a
    category also rewrites the category of the user's feeds.
    """
    __tablename__ = "feed_categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    name = Column(String(128), nullable=False)
    color = Column(String(32), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_feed_categories_user_name"),
    )


# -----------------------------------------------------------------------------
# FeedArticle
# -----------------------------------------------------------------------------

class FeedArticle(Base):
    """
    A content record scoped to one feed.

    Natural key is (feed_id, guid); guid falls back to the item link.
    read/saved are user state and are never overwritten by re-ingestion.
    """
    __tablename__ = "rss_articles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    feed_id = Column(Uuid(as_uuid=True), ForeignKey("rss_feeds.id", ondelete="CASCADE"), nullable=False)
    guid = Column(Text, nullable=False)

    title = Column(Text, nullable=False, default="Untitled")
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    link = Column(Text, nullable=False, default="")
    published_at = Column(DateTime, nullable=True)
    author = Column(Text, nullable=False, default="Unknown")
    thumbnail_url = Column(Text, nullable=True)
    categories = Column(JSONType, nullable=False, default=list)

    # Classification (best-effort)
    ai_categories = Column(JSONType, nullable=False, default=list)
    ai_summary = Column(Text, nullable=False, default="")

    # User state
    read = Column(Boolean, default=False, nullable=False)
    saved = Column(Boolean, default=False, nullable=False)
    # Denormalized cache of "at least one TransformedContent exists"
    transformed = Column(Boolean, default=False, nullable=False)
    full_content_fetched = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    feed = relationship("Feed", back_populates="articles")

    __table_args__ = (
        UniqueConstraint("feed_id", "guid", name="uq_rss_articles_feed_guid"),
        Index("ix_rss_articles_published_at", "published_at"),
    )


# -----------------------------------------------------------------------------
# ExternalContent
# -----------------------------------------------------------------------------

class ExternalContent(Base):
    """
    Platform-imported content (WordPress, YouTube, LinkedIn, Facebook, manual).

    Natural key is (user_id, source_type, source_id).
    """
    __tablename__ = "external_content"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    source_type = Column(String(32), nullable=False)
    source_id = Column(String(512), nullable=False)

    title = Column(Text, nullable=False, default="Untitled")
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    link = Column(Text, nullable=False, default="")
    published_at = Column(DateTime, nullable=True)
    author = Column(Text, nullable=False, default="Unknown")
    thumbnail_url = Column(Text, nullable=True)
    categories = Column(JSONType, nullable=False, default=list)
    content_metadata = Column("metadata", JSONType, nullable=False, default=dict)

    ai_categories = Column(JSONType, nullable=False, default=list)
    ai_summary = Column(Text, nullable=False, default="")

    saved = Column(Boolean, default=True, nullable=False)
    transformed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "source_type", "source_id", name="uq_external_content_natural_key"),
        Index("ix_external_content_user_source_type", "user_id", "source_type"),
        Index("ix_external_content_published_at", "published_at"),
    )


# -----------------------------------------------------------------------------
# TransformedContent
# -----------------------------------------------------------------------------

class TransformedContent(Base):
    """Derived artifact produced from an origin FeedArticle or ExternalContent."""
    __tablename__ = "transformed_content"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    # Either an rss_articles.id or an external_content.id
    original_content_id = Column(Uuid(as_uuid=True), nullable=False)
    transformation_type = Column(String(64), nullable=False)
    result_data = Column(JSONType, nullable=True)
    settings = Column(JSONType, nullable=False, default=dict)
    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transformed_content_original", "original_content_id"),
    )


# -----------------------------------------------------------------------------
# ApiCredential
# -----------------------------------------------------------------------------

class ApiCredential(Base):
    """Stored access token for a platform, per user."""
    __tablename__ = "api_credentials"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    service = Column(String(32), nullable=False)
    api_key = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "service", name="uq_api_credentials_user_service"),
    )
