# app/services/api_fetchers/youtube_fetcher.py
"""
YouTube Data API v3 fetcher.

Lists a channel's most recent videos via the search endpoint.

API Documentation: https://developers.google.com/youtube/v3/docs/search/list
"""

import logging
from typing import Any

from app.exceptions import FetchError
from app.models import SourceType
from app.services.api_fetchers.base import BaseFetcher
from app.services.transport import ProxyChainTransport

logger = logging.getLogger(__name__)


class YouTubeFetcher(BaseFetcher):
    """Fetch recent videos of one channel."""

    BASE_URL = "https://www.googleapis.com/youtube/v3"

    def __init__(self, api_key: str, channel_id: str, transport: ProxyChainTransport | None = None):
        super().__init__(transport)
        if not api_key:
            raise FetchError(self.BASE_URL, "YouTube API key not found. Store one for the 'youtube' service first.")
        if not channel_id:
            raise FetchError(self.BASE_URL, "YouTube channel ID is required.")
        self.api_key = api_key
        self.channel_id = channel_id

    @property
    def source_type(self) -> str:
        return SourceType.YOUTUBE.value

    async def fetch_items(self, limit: int | None = None) -> list[dict[str, Any]]:
        data = await self.transport.fetch_json(
            f"{self.BASE_URL}/search",
            params={
                "key": self.api_key,
                "channelId": self.channel_id,
                "part": "snippet",
                "order": "date",
                "maxResults": self.resolve_limit(limit),
                "type": "video",
            },
        )
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise FetchError(f"{self.BASE_URL}/search", "YouTube API response has no items")

        logger.info(f"[FETCH] YouTube channel {self.channel_id}: {len(items)} videos")
        return items
