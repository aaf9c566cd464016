# app/services/api_fetchers/__init__.py
"""
Platform fetchers for content imports.

Each fetcher pulls raw item payloads from one platform's API; the
normalizer turns them into ContentRecords.

Supported platforms:
- WordPress REST API
- YouTube Data API v3
- Facebook Graph API
- LinkedIn UGC API
"""

from app.services.api_fetchers.base import BaseFetcher
from app.services.api_fetchers.facebook_fetcher import FacebookFetcher
from app.services.api_fetchers.linkedin_fetcher import LinkedInFetcher
from app.services.api_fetchers.wordpress_fetcher import WordPressFetcher
from app.services.api_fetchers.youtube_fetcher import YouTubeFetcher

__all__ = [
    "BaseFetcher",
    "FacebookFetcher",
    "LinkedInFetcher",
    "WordPressFetcher",
    "YouTubeFetcher",
]
