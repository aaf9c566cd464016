# app/services/api_fetchers/linkedin_fetcher.py
"""
LinkedIn UGC posts fetcher.

Requires an access token of an approved LinkedIn developer application
with the r_member_social scope.
"""

import logging
from typing import Any

from app.exceptions import FetchError
from app.models import SourceType
from app.services.api_fetchers.base import BaseFetcher
from app.services.transport import ProxyChainTransport

logger = logging.getLogger(__name__)


class LinkedInFetcher(BaseFetcher):
    """Fetch the member's UGC posts."""

    BASE_URL = "https://api.linkedin.com/v2"

    def __init__(self, access_token: str, author_urn: str | None = None, transport: ProxyChainTransport | None = None):
        super().__init__(transport)
        if not access_token:
            raise FetchError(self.BASE_URL, "LinkedIn access token not found. Store one for the 'linkedin' service first.")
        self.access_token = access_token
        self.author_urn = author_urn

    @property
    def source_type(self) -> str:
        return SourceType.LINKEDIN.value

    async def fetch_items(self, limit: int | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"count": self.resolve_limit(limit)}
        if self.author_urn:
            params["q"] = "authors"
            params["authors"] = f"List({self.author_urn})"

        data = await self.transport.fetch_json(
            f"{self.BASE_URL}/ugcPosts",
            params=params,
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "X-Restli-Protocol-Version": "2.0.0",
            },
        )
        posts = data.get("elements") if isinstance(data, dict) else None
        if not isinstance(posts, list):
            raise FetchError(f"{self.BASE_URL}/ugcPosts", "LinkedIn API response has no elements")

        logger.info(f"[FETCH] LinkedIn: {len(posts)} posts")
        return posts
