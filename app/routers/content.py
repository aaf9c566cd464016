# app/routers/content.py
"""
Platform content endpoints.

POST /v1/content/import                          - Import recent items from a platform API
POST /v1/content/manual                          - Store a hand-entered record
GET  /v1/content                                 - The caller's imported content
POST /v1/content/transformations                 - Save a transformation of a stored record
GET  /v1/content/{content_id}/transformations    - Transformations of one record
PUT  /v1/content/credentials                     - Store a platform credential
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import models
from app.auth import get_current_user_id
from app.database import get_db
from app.dependencies import get_content_store, get_ingestion_service
from app.exceptions import ContentCollectorError, FetchError
from app.models import SourceType
from app.schemas.common import OperationResult
from app.schemas.content import (
    ApiCredentialCreate,
    ExternalContentResponse,
    ManualContentCreate,
    PlatformImportRequest,
    TransformationCreate,
    TransformationResponse,
)
from app.schemas.feeds import IngestResultResponse
from app.services import ingestion as ingestion_module
from app.services import transformations
from app.services.content_store import ContentStore
from app.services.ingestion import IngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/content", tags=["content"])


@router.post("/import", response_model=OperationResult[IngestResultResponse])
async def import_from_platform(
    request: PlatformImportRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> OperationResult:
    import_request = ingestion_module.PlatformImportRequest(
        source_type=request.source_type.value,
        access_token=request.access_token,
        channel_id=request.channel_id,
        site_url=request.site_url,
        author_urn=request.author_urn,
        limit=request.limit,
    )
    try:
        outcome = await ingestion.import_from_platform(user_id, import_request, db=db)
    except FetchError as e:
        logger.warning(f"[IMPORT] {request.source_type.value} import failed for user {user_id}: {e}")
        return OperationResult.fail(str(e))
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok(IngestResultResponse.model_validate(outcome))


@router.post("/manual", response_model=OperationResult[IngestResultResponse])
async def add_manual_content(
    request: ManualContentCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> OperationResult:
    outcome = await ingestion.import_content(
        user_id, SourceType.MANUAL, [request.model_dump()], db=db
    )
    if outcome.error_count:
        return OperationResult.fail(outcome.errors[0])
    return OperationResult.ok(IngestResultResponse.model_validate(outcome))


@router.get("", response_model=OperationResult[list[ExternalContentResponse]])
def list_content(
    source_type: SourceType | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    try:
        items = store.list_external_content(
            db,
            user_id,
            source_type=source_type.value if source_type else None,
            limit=limit,
            offset=offset,
        )
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok([ExternalContentResponse.model_validate(c) for c in items])


@router.post("/transformations", response_model=OperationResult[TransformationResponse])
def create_transformation(
    request: TransformationCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> OperationResult:
    try:
        transformed = transformations.save_transformation(
            db,
            user_id,
            request.original_content_id,
            request.transformation_type,
            request.result_data,
            settings=request.settings,
            title=request.title,
            description=request.description,
        )
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    if transformed is None:
        raise HTTPException(status_code=404, detail="Original content not found")
    return OperationResult.ok(TransformationResponse.model_validate(transformed))


@router.get("/{content_id}/transformations", response_model=OperationResult[list[TransformationResponse]])
def list_transformations(
    content_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> OperationResult:
    try:
        items = transformations.list_transformations(db, user_id, content_id)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok([TransformationResponse.model_validate(t) for t in items])


@router.put("/credentials", response_model=OperationResult[None])
def set_credential(
    request: ApiCredentialCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: ContentStore = Depends(get_content_store),
) -> OperationResult:
    if request.service.value not in models.CREDENTIAL_SERVICES:
        raise HTTPException(status_code=400, detail=f"{request.service.value} does not use stored credentials")
    try:
        store.set_api_credential(db, user_id, request.service.value, request.api_key)
    except ContentCollectorError as e:
        return OperationResult.fail(str(e))
    return OperationResult.ok(message=f"{request.service.value} credential saved")
