"""
API routers for v1 endpoints.
"""

from app.routers.admin import router as admin_router
from app.routers.articles import router as articles_router
from app.routers.content import router as content_router
from app.routers.feeds import router as feeds_router

__all__ = [
    "admin_router",
    "articles_router",
    "content_router",
    "feeds_router",
]
