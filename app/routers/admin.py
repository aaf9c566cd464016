# app/routers/admin.py
"""
Admin maintenance endpoints.

POST /v1/admin/refresh-all - Refresh every registered feed concurrently
POST /v1/admin/cleanup     - Purge old unsaved, untransformed feed articles
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import require_admin_key
from app.database import get_db
from app.dependencies import get_bulk_refresh_driver
from app.exceptions import StoreError
from app.schemas.admin import (
    CleanupRequest,
    CleanupResponse,
    RefreshAllResponse,
    SourceRefreshResponse,
)
from app.schemas.common import OperationResult
from app.services.bulk_refresh import BulkRefreshDriver
from app.services.retention import purge_old_articles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["admin"])


@router.post("/refresh-all", response_model=OperationResult[RefreshAllResponse])
async def refresh_all(
    _: None = Depends(require_admin_key),
    driver: BulkRefreshDriver = Depends(get_bulk_refresh_driver),
) -> OperationResult:
    """
    Refresh every registered feed.

    Individual feed failures are reported per feed; the call only fails
    when the feed list itself cannot be loaded.
    """
    summary = await driver.refresh_all()
    if not summary.success:
        return OperationResult.fail(summary.error or "Bulk refresh failed")

    return OperationResult.ok(
        RefreshAllResponse(
            total_sources=summary.total_sources,
            successful_sources=summary.successful_sources,
            failed_sources=summary.failed_sources,
            per_source_results=[
                SourceRefreshResponse(**vars(r)) for r in summary.per_source_results
            ],
            message=summary.message,
            trace_id=summary.trace_id,
        ),
        message=summary.message,
    )


@router.post("/cleanup", response_model=OperationResult[CleanupResponse])
def cleanup(
    request: CleanupRequest = CleanupRequest(),
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_key),
) -> OperationResult:
    try:
        result = purge_old_articles(db, days=request.days, dry_run=request.dry_run)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error(f"[RETENTION] Cleanup failed: {e}")
        return OperationResult.fail(str(e))

    return OperationResult.ok(
        CleanupResponse(
            dry_run=result.dry_run,
            days=result.days,
            threshold=result.threshold,
            articles_matched=result.articles_matched,
            articles_deleted=result.articles_deleted,
            message=result.message,
        ),
        message=result.message,
    )
