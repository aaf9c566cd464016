# app/services/retention/__init__.py
"""
Retention management for ingested feed articles.

Services:
- purge_service: age-based deletion of unsaved, untransformed feed articles
"""

from app.services.retention.purge_service import (
    PurgeResult,
    purge_old_articles,
)

__all__ = [
    "PurgeResult",
    "purge_old_articles",
]
