# app/services/ingestion.py
"""
Ingestion orchestrator.

Feed path (one registered RSS/Atom/JSON feed):
1. Load the feed registration
2. Fetch the raw document through the proxy chain
3. Parse it into items
4. Per item, in order: normalize -> dedup lookup -> classify -> upsert
5. Record last_fetched_at

Import path (platform content for one user):
1. Fetch raw payloads from the platform API (or take them from the caller)
2. Per payload: normalize -> classify -> upsert

Item-level failures are counted and never abort the batch. Source-level
failures (feed lookup, fetch, parse, timestamp update) propagate to the caller.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from app import models
from app.database import get_session_factory
from app.exceptions import FetchError, NormalizationError, StoreError
from app.models import SourceType
from app.services.api_fetchers import (
    BaseFetcher,
    FacebookFetcher,
    LinkedInFetcher,
    WordPressFetcher,
    YouTubeFetcher,
)
from app.services.content_store import ContentStore
from app.services.deduper import Deduper
from app.services.feed_parser import ParsedFeed, parse_feed
from app.services.llm_classifier import ClassificationEnricher
from app.services.normalizer import ContentRecord, normalize
from app.services.transport import ProxyChainTransport, looks_like_feed

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Outcome of ingesting one source."""
    source_id: str
    source_title: str = ""
    added_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return self.added_count + self.updated_count + self.skipped_count + self.error_count

    def record_error(self, message: str) -> None:
        self.error_count += 1
        self.errors.append(message)


@dataclass
class PlatformImportRequest:
    """What to import from a platform and with which credential."""
    source_type: str
    access_token: str | None = None  # API key for YouTube, OAuth token for Facebook/LinkedIn
    channel_id: str | None = None    # YouTube
    site_url: str | None = None      # WordPress
    author_urn: str | None = None    # LinkedIn
    limit: int | None = None


class IngestionService:
    """Feed ingestion and platform import service."""

    def __init__(
        self,
        session_factory: sessionmaker | None = None,
        transport: ProxyChainTransport | None = None,
        classifier: ClassificationEnricher | None = None,
        store: ContentStore | None = None,
        deduper: Deduper | None = None,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.transport = transport or ProxyChainTransport()
        self.classifier = classifier or ClassificationEnricher()
        self.deduper = deduper or Deduper()
        self.store = store or ContentStore(self.deduper)

    @contextmanager
    def _session(self, db: Session | None) -> Iterator[Session]:
        if db is not None:
            yield db
            return
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()

    async def _enrich(self, record: ContentRecord) -> None:
        result = await self.classifier.classify(record.title, record.body)
        record.ai_categories = result.categories
        record.ai_summary = result.summary

    # -------------------------------------------------------------------------
    # Feed path
    # -------------------------------------------------------------------------

    async def fetch_and_parse(self, url: str) -> ParsedFeed:
        """
        Fetch a feed URL through the proxy chain and parse it.

        Raises:
            FetchError: no strategy could fetch the URL
            ParseError: the document is not a feed
        """
        raw = await self.transport.fetch_raw(url, validate=looks_like_feed)
        return parse_feed(raw)

    async def ingest_feed(self, feed_id: uuid.UUID, db: Session | None = None) -> IngestResult:
        """
        Refresh one feed.

        Raises:
            StoreError: the feed could not be loaded, or its timestamp not updated
            FetchError: every transport strategy failed
            ParseError: the fetched document is not a feed
        """
        with self._session(db) as session:
            feed = self.store.get_feed(session, feed_id)
            if feed is None:
                raise StoreError(f"Feed {feed_id} not found")

            logger.info(f"[INGEST] Refreshing feed '{feed.title}' ({feed.url})")
            parsed = await self.fetch_and_parse(feed.url)
            return await self.ingest_parsed_feed(session, feed, parsed)

    async def ingest_parsed_feed(self, db: Session, feed: models.Feed, parsed: ParsedFeed) -> IngestResult:
        """Run the per-item loop for an already-fetched feed, then record last_fetched_at."""
        feed_id = feed.id
        result = IngestResult(source_id=str(feed_id), source_title=feed.title)

        for index, item in enumerate(parsed.items):
            label = item.guid or item.link or f"item #{index + 1}"
            try:
                record = normalize(SourceType.RSS, item)

                if self.deduper.find_feed_article(db, feed_id, record) is not None:
                    result.skipped_count += 1
                    continue

                await self._enrich(record)
                outcome = self.store.upsert_feed_article(db, feed_id, record)
                if outcome.created:
                    result.added_count += 1
                else:
                    # Inserted by a concurrent refresh between lookup and upsert
                    result.skipped_count += 1

            except NormalizationError as e:
                logger.warning(f"[INGEST] Skipping unusable item {label} in feed {feed_id}: {e}")
                result.record_error(f"{label}: {e}")
            except StoreError as e:
                logger.error(f"[INGEST] Failed to store item {label} in feed {feed_id}: {e}")
                result.record_error(f"{label}: {e}")
            except Exception as e:
                logger.error(f"[INGEST] Error processing item {label} in feed {feed_id}: {e}", exc_info=True)
                result.record_error(f"{label}: {e}")

        # Runs whether or not individual items failed
        self.store.touch_feed(db, feed_id)

        logger.info(
            f"[INGEST] Feed '{result.source_title}': {result.added_count} added, "
            f"{result.skipped_count} skipped, {result.error_count} errors",
            extra={
                "event": "feed_ingested",
                "feed_id": str(feed_id),
                "items_added": result.added_count,
                "items_skipped": result.skipped_count,
                "items_failed": result.error_count,
            },
        )
        return result

    # -------------------------------------------------------------------------
    # Import path
    # -------------------------------------------------------------------------

    async def import_content(
        self,
        user_id: str,
        source_type: SourceType | str,
        payloads: list[Any],
        db: Session | None = None,
    ) -> IngestResult:
        """Normalize, classify and upsert platform payloads for a user. New rows are saved."""
        source_type = SourceType(source_type)
        result = IngestResult(source_id=source_type.value, source_title=source_type.value)

        with self._session(db) as session:
            for index, payload in enumerate(payloads):
                label = f"{source_type.value} item #{index + 1}"
                try:
                    record = normalize(source_type, payload)
                    label = f"{source_type.value}:{record.source_id}"
                    await self._enrich(record)
                    outcome = self.store.upsert_external_content(session, user_id, record)
                    if outcome.created:
                        result.added_count += 1
                    else:
                        result.updated_count += 1

                except NormalizationError as e:
                    logger.warning(f"[IMPORT] Skipping unusable {label}: {e}")
                    result.record_error(f"{label}: {e}")
                except StoreError as e:
                    logger.error(f"[IMPORT] Failed to store {label}: {e}")
                    result.record_error(f"{label}: {e}")
                except Exception as e:
                    logger.error(f"[IMPORT] Error processing {label}: {e}", exc_info=True)
                    result.record_error(f"{label}: {e}")

        logger.info(
            f"[IMPORT] {source_type.value} for user {user_id}: {result.added_count} added, "
            f"{result.updated_count} updated, {result.error_count} errors",
            extra={"event": "content_imported", "source_type": source_type.value},
        )
        return result

    async def import_from_platform(
        self,
        user_id: str,
        request: PlatformImportRequest,
        db: Session | None = None,
    ) -> IngestResult:
        """
        Fetch a platform's recent items and import them.

        Raises:
            FetchError: missing credential/parameters, or the platform API failed
        """
        with self._session(db) as session:
            fetcher = self._build_fetcher(session, user_id, request)
            payloads = await fetcher.fetch_items(limit=request.limit)
            return await self.import_content(user_id, fetcher.source_type, payloads, db=session)

    def _build_fetcher(self, db: Session, user_id: str, request: PlatformImportRequest) -> BaseFetcher:
        try:
            source_type = SourceType(request.source_type)
        except ValueError as e:
            raise FetchError("", f"Unsupported source type: {request.source_type}") from e

        if source_type == SourceType.WORDPRESS:
            return WordPressFetcher(request.site_url or "", transport=self.transport)

        if source_type in (SourceType.YOUTUBE, SourceType.FACEBOOK, SourceType.LINKEDIN):
            token = request.access_token or self.store.get_api_credential(db, user_id, source_type.value)
            if source_type == SourceType.YOUTUBE:
                return YouTubeFetcher(token or "", request.channel_id or "", transport=self.transport)
            if source_type == SourceType.FACEBOOK:
                return FacebookFetcher(token or "", transport=self.transport)
            return LinkedInFetcher(token or "", author_urn=request.author_urn, transport=self.transport)

        raise FetchError("", f"{source_type.value} content cannot be fetched from a platform API")
