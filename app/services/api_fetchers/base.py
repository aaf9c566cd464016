# app/services/api_fetchers/base.py
"""
Base class for platform content fetchers.

Fetchers only talk to the platform API and return its raw item payloads;
mapping to ContentRecord is the normalizer's job.
"""

from abc import ABC, abstractmethod
from typing import Any

from app.config import get_settings
from app.services.transport import ProxyChainTransport


class BaseFetcher(ABC):
    """
    Abstract base class for platform fetchers.

    All fetchers must implement this interface to feed
    IngestionService.import_content.
    """

    def __init__(self, transport: ProxyChainTransport | None = None):
        self.transport = transport or ProxyChainTransport()

    @abstractmethod
    async def fetch_items(self, limit: int | None = None) -> list[dict[str, Any]]:
        """
        Fetch the most recent items from the platform.

        Args:
            limit: Maximum number of items (defaults to PLATFORM_FETCH_LIMIT)

        Returns:
            Raw item payloads, newest first

        Raises:
            FetchError: the API could not be reached or returned an error
        """
        pass

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier (e.g., 'wordpress', 'youtube')."""
        pass

    @staticmethod
    def resolve_limit(limit: int | None) -> int:
        return limit or get_settings().PLATFORM_FETCH_LIMIT
