# app/dependencies.py
"""FastAPI dependency providers for services. Overridden in tests."""

from app.database import get_session_factory
from app.services.body_extractor import BodyExtractor
from app.services.bulk_refresh import BulkRefreshDriver
from app.services.content_store import ContentStore
from app.services.ingestion import IngestionService


def get_content_store() -> ContentStore:
    return ContentStore()


def get_ingestion_service() -> IngestionService:
    return IngestionService(session_factory=get_session_factory())


def get_bulk_refresh_driver() -> BulkRefreshDriver:
    return BulkRefreshDriver(session_factory=get_session_factory())


def get_body_extractor() -> BodyExtractor:
    return BodyExtractor()
