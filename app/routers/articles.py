# app/routers/articles.py
"""
Feed article endpoints.

GET  /v1/articles                          - The caller's articles across feeds (optional feed category)
POST /v1/articles/{article_id}/read        - Mark read/unread
POST /v1/articles/{article_id}/saved       - Save/unsave
POST /v1/articles/{article_id}/full-content - Download and store the full article body
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.dependencies import get_body_extractor, get_content_store
from app.exceptions import ContentCollectorError
from app.schemas.common import OperationResult
from app.schemas.feeds import (
    ArticleReadUpdate,
    ArticleResponse,
    ArticleSavedUpdate,
    FullContentResponse,
)
from app.services.body_extractor import BodyExtractor
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/articles", tags=["articles"])


@router.get("", response_model=OperationResult[list[ArticleResponse]])
def list_articles(
    category: str | None = Query(None, description="Only articles of feeds in this category"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        articles = store.list_user_articles(db, user_id, category=category, limit=limit, offset=offset)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok([ArticleResponse.model_validate(a) for a in articles])


@router.post("/{article_id}/read", response_model=OperationResult[ArticleResponse])
def mark_read(
    article_id: uuid.UUID,
    request: ArticleReadUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        article = store.set_article_read(db, user_id, article_id, request.read)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return OperationResult.ok(ArticleResponse.model_validate(article))


@router.post("/{article_id}/saved", response_model=OperationResult[ArticleResponse])
def mark_saved(
    article_id: uuid.UUID,
    request: ArticleSavedUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        article = store.set_article_saved(db, user_id, article_id, request.saved)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return OperationResult.ok(ArticleResponse.model_validate(article))


@router.post("/{article_id}/full-content", response_model=OperationResult[FullContentResponse])
def fetch_full_content(
    article_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
    extractor: BodyExtractor = Depends(get_body_extractor),
) -> OperationResult:
    """Blocking download and extraction; runs in the threadpool."""
    try:
        article = store.get_feed_article(db, article_id, user_id=user_id)
        if not article:
            raise HTTPException(status_code=404, detail="Article not found")
        if not article.link:
            return OperationResult.fail("Article has no link to fetch")

        extraction = extractor.extract(article.link)
        if not extraction.success:
            reason = extraction.failure_reason.value if extraction.failure_reason else "unknown"
            return OperationResult.fail(f"Could not extract article content ({reason})")

        store.set_article_full_content(db, article, extraction.body)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))

    return OperationResult.ok(
        FullContentResponse(
            article_id=str(article_id),
            content_length=extraction.char_count,
            extractor_used=extraction.extractor_used,
        ),
        message="Article content updated successfully",
    )
