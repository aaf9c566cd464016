# app/services/api_fetchers/wordpress_fetcher.py
"""
WordPress REST API fetcher.

Any self-hosted or wordpress.com site exposes posts at /wp-json/wp/v2/posts.
_embed=1 inlines author and featured media so no follow-up requests are needed.
"""

import logging
import time
from typing import Any

from app.exceptions import FetchError
from app.models import SourceType
from app.services.api_fetchers.base import BaseFetcher
from app.services.transport import ProxyChainTransport

logger = logging.getLogger(__name__)


class WordPressFetcher(BaseFetcher):
    """Fetch posts from a WordPress site."""

    def __init__(self, site_url: str, transport: ProxyChainTransport | None = None):
        super().__init__(transport)
        if not site_url:
            raise FetchError(site_url or "", "WordPress site URL is required.")
        self.site_url = site_url.rstrip("/")

    @property
    def source_type(self) -> str:
        return SourceType.WORDPRESS.value

    @property
    def api_url(self) -> str:
        return f"{self.site_url}/wp-json/wp/v2/posts"

    async def fetch_items(self, limit: int | None = None) -> list[dict[str, Any]]:
        start_time = time.time()
        data = await self.transport.fetch_json(
            self.api_url,
            params={"per_page": self.resolve_limit(limit), "_embed": 1},
        )
        if not isinstance(data, list):
            raise FetchError(self.api_url, "WordPress API did not return a list of posts")

        posts = [post for post in data if isinstance(post, dict)]
        for post in posts:
            post.setdefault("_site", self.site_url)

        logger.info(
            f"[FETCH] WordPress {self.site_url}: {len(posts)} posts in {int((time.time() - start_time) * 1000)}ms"
        )
        return posts
