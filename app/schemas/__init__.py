"""
Pydantic schemas for API request/response validation.
"""

from app.schemas.admin import (
    CleanupRequest,
    CleanupResponse,
    RefreshAllResponse,
    SourceRefreshResponse,
)
from app.schemas.common import OperationResult
from app.schemas.content import (
    ApiCredentialCreate,
    ExternalContentResponse,
    ManualContentCreate,
    PlatformImportRequest,
    TransformationCreate,
    TransformationResponse,
)
from app.schemas.feeds import (
    ArticleReadUpdate,
    ArticleResponse,
    ArticleSavedUpdate,
    CuratedCategory,
    FeedAddResponse,
    FeedCategoryCreate,
    FeedCategoryRename,
    FeedCategoryResponse,
    FeedCategoryUpdate,
    FeedCreate,
    FeedResponse,
    FullContentResponse,
    IngestResultResponse,
)

__all__ = [
    "ApiCredentialCreate",
    "ArticleReadUpdate",
    "ArticleResponse",
    "ArticleSavedUpdate",
    "CleanupRequest",
    "CleanupResponse",
    "CuratedCategory",
    "ExternalContentResponse",
    "FeedAddResponse",
    "FeedCategoryCreate",
    "FeedCategoryRename",
    "FeedCategoryResponse",
    "FeedCategoryUpdate",
    "FeedCreate",
    "FeedResponse",
    "FullContentResponse",
    "IngestResultResponse",
    "ManualContentCreate",
    "OperationResult",
    "PlatformImportRequest",
    "RefreshAllResponse",
    "SourceRefreshResponse",
    "TransformationCreate",
    "TransformationResponse",
]
