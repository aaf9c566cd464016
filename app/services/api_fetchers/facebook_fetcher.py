# app/services/api_fetchers/facebook_fetcher.py
"""
Facebook Graph API fetcher for the token owner's posts.
"""

import logging
from typing import Any

from app.exceptions import FetchError
from app.models import SourceType
from app.services.api_fetchers.base import BaseFetcher
from app.services.transport import ProxyChainTransport

logger = logging.getLogger(__name__)


class FacebookFetcher(BaseFetcher):
    """Fetch posts from /me/posts."""

    BASE_URL = "https://graph.facebook.com/v18.0"
    FIELDS = "id,message,story,created_time,permalink_url,full_picture,from"

    def __init__(self, access_token: str, transport: ProxyChainTransport | None = None):
        super().__init__(transport)
        if not access_token:
            raise FetchError(self.BASE_URL, "Facebook access token not found. Store one for the 'facebook' service first.")
        self.access_token = access_token

    @property
    def source_type(self) -> str:
        return SourceType.FACEBOOK.value

    async def fetch_items(self, limit: int | None = None) -> list[dict[str, Any]]:
        data = await self.transport.fetch_json(
            f"{self.BASE_URL}/me/posts",
            params={
                "access_token": self.access_token,
                "limit": self.resolve_limit(limit),
                "fields": self.FIELDS,
            },
        )
        posts = data.get("data") if isinstance(data, dict) else None
        if not isinstance(posts, list):
            raise FetchError(f"{self.BASE_URL}/me/posts", "Facebook API response has no data")

        logger.info(f"[FETCH] Facebook: {len(posts)} posts")
        return posts
