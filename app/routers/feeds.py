# app/routers/feeds.py
"""
Feed endpoints.

POST   /v1/feeds                      - Register a feed (validated by fetch + parse, then ingested)
GET    /v1/feeds                      - List the caller's feeds
DELETE /v1/feeds/{feed_id}            - Remove a feed and its articles
PATCH  /v1/feeds/{feed_id}/category   - Set or clear a feed's category
POST   /v1/feeds/{feed_id}/refresh    - Refresh one feed now
GET    /v1/feeds/{feed_id}/articles   - A feed's articles, newest first
GET    /v1/feeds/curated              - Curated feed catalogue
GET    /v1/feeds/curated/{category}   - Curated feeds of one category
GET    /v1/feeds/categories           - The caller's feed categories
POST   /v1/feeds/categories           - Add a feed category
PATCH  /v1/feeds/categories/{id}      - Rename a category (its feeds follow)
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.curated_feeds import CURATED_FEEDS, feeds_for_category
from app.database import get_db
from app.dependencies import get_content_store, get_ingestion_service
from app.exceptions import ContentCollectorError, FetchError, ParseError
from app.schemas.common import OperationResult
from app.schemas.feeds import (
    ArticleResponse,
    CuratedCategory,
    CuratedFeed,
    FeedAddResponse,
    FeedCategoryCreate,
    FeedCategoryRename,
    FeedCategoryResponse,
    FeedCategoryUpdate,
    FeedCreate,
    FeedResponse,
    IngestResultResponse,
)
from app.services.content_store import ContentStore
from app.services.ingestion import IngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/feeds", tags=["feeds"])


# -----------------------------------------------------------------------------
# Curated catalogue
# -----------------------------------------------------------------------------


@router.get("/curated", response_model=OperationResult[list[CuratedCategory]])
def list_curated_feeds() -> OperationResult:
    return OperationResult.ok(
        [
            CuratedCategory(category=name, feeds=[CuratedFeed(**f) for f in feeds])
            for name, feeds in CURATED_FEEDS.items()
        ]
    )


@router.get("/curated/{category}", response_model=OperationResult[list[CuratedFeed]])
def get_curated_category(category: str) -> OperationResult:
    feeds = feeds_for_category(category)
    if not feeds:
        return OperationResult.fail(f"No curated feeds for category '{category}'")
    return OperationResult.ok([CuratedFeed(**f) for f in feeds])


# -----------------------------------------------------------------------------
# Feed categories
# -----------------------------------------------------------------------------


@router.get("/categories", response_model=OperationResult[list[FeedCategoryResponse]])
def list_feed_categories(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        categories = store.list_feed_categories(db, user_id)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok([FeedCategoryResponse.model_validate(c) for c in categories])


@router.post("/categories", response_model=OperationResult[FeedCategoryResponse])
def add_feed_category(
    request: FeedCategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    name = request.name.strip()
    try:
        if store.get_feed_category_by_name(db, user_id, name):
            return OperationResult.fail(f"Category '{name}' already exists")
        category = store.add_feed_category(db, user_id, name, request.color)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok(FeedCategoryResponse.model_validate(category))


@router.patch("/categories/{category_id}", response_model=OperationResult[FeedCategoryResponse])
def rename_feed_category(
    category_id: uuid.UUID,
    request: FeedCategoryRename,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    """Rename a category. Feeds filed under the old name are moved to the new one."""
    try:
        category = store.rename_feed_category(db, user_id, category_id, request.name.strip(), request.color)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return OperationResult.ok(FeedCategoryResponse.model_validate(category))


# -----------------------------------------------------------------------------
# Feeds
# -----------------------------------------------------------------------------


@router.post("", response_model=OperationResult[FeedAddResponse])
async def add_feed(
    request: FeedCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> OperationResult:
    """Register a feed. An already-registered URL is reported as success."""
    url = request.url.strip()
    try:
        existing = store.get_feed_by_url(db, user_id, url)
        if existing:
            return OperationResult.ok(
                FeedAddResponse(feed=FeedResponse.model_validate(existing)),
                message="Feed already exists",
            )

        try:
            parsed = await ingestion.fetch_and_parse(url)
        except (FetchError, ParseError) as e:
            logger.warning(f"[FEEDS] Rejected feed {url}: {e}")
            return OperationResult.fail(f"Invalid RSS feed URL or feed could not be parsed: {e}")

        feed = store.add_feed(db, user_id, url, request.title or parsed.title, request.category)
        feed_response = FeedResponse.model_validate(feed)
        outcome = await ingestion.ingest_parsed_feed(db, feed, parsed)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))

    return OperationResult.ok(
        FeedAddResponse(
            feed=feed_response,
            ingest=IngestResultResponse.model_validate(outcome),
        )
    )


@router.get("", response_model=OperationResult[list[FeedResponse]])
def list_feeds(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        feeds = store.list_feeds(db, user_id=user_id)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok([FeedResponse.model_validate(f) for f in feeds])


@router.delete("/{feed_id}", response_model=OperationResult[None])
def delete_feed(
    feed_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        deleted = store.delete_feed(db, user_id, feed_id)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Feed not found")
    return OperationResult.ok(message="Feed deleted")


@router.patch("/{feed_id}/category", response_model=OperationResult[FeedResponse])
def update_feed_category(
    feed_id: uuid.UUID,
    request: FeedCategoryUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        feed = store.update_feed_category(db, user_id, feed_id, request.category)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    if not feed:
        raise HTTPException(status_code=404, detail="Feed not found")
    return OperationResult.ok(FeedResponse.model_validate(feed))


@router.post("/{feed_id}/refresh", response_model=OperationResult[IngestResultResponse])
async def refresh_feed(
    feed_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> OperationResult:
    try:
        if not store.get_feed(db, feed_id, user_id=user_id):
            raise HTTPException(status_code=404, detail="Feed not found")
        outcome = await ingestion.ingest_feed(feed_id, db=db)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok(IngestResultResponse.model_validate(outcome))


@router.get("/{feed_id}/articles", response_model=OperationResult[list[ArticleResponse]])
def list_feed_articles(
    feed_id: uuid.UUID,
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        if not store.get_feed(db, feed_id, user_id=user_id):
            raise HTTPException(status_code=404, detail="Feed not found")
        articles = store.list_feed_articles(db, feed_id, limit=limit, offset=offset)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok([ArticleResponse.model_validate(a) for a in articles])
