# app/services/__init__.py
"""
Business logic services.
"""

from app.services.bulk_refresh import BulkRefreshDriver
from app.services.content_store import ContentStore
from app.services.deduper import Deduper
from app.services.feed_parser import parse_feed
from app.services.ingestion import IngestionService
from app.services.llm_classifier import ClassificationEnricher
from app.services.normalizer import normalize
from app.services.transport import ProxyChainTransport

__all__ = [
    "BulkRefreshDriver",
    "ClassificationEnricher",
    "ContentStore",
    "Deduper",
    "IngestionService",
    "ProxyChainTransport",
    "normalize",
    "parse_feed",
]
