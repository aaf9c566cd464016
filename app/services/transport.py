# app/services/transport.py
"""
Feed transport with an ordered proxy-chain fallback.

A feed URL is tried directly first and then through a list of public relay
services. Each attempt is bounded by FETCH_TIMEOUT_SECONDS; the first attempt
that returns a 2xx response (and passes the optional validator) wins and no
later strategy is tried. When every strategy fails, FetchError is raised,
chained to the last underlying cause.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from app.config import get_settings
from app.exceptions import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyStrategy:
    """A named way of reaching a URL."""

    name: str
    rewrite: Callable[[str], str]


PROXY_STRATEGIES: dict[str, ProxyStrategy] = {
    "direct": ProxyStrategy("direct", lambda url: url),
    "corsproxy": ProxyStrategy("corsproxy", lambda url: f"https://corsproxy.io/?{quote(url, safe='')}"),
    "allorigins": ProxyStrategy("allorigins", lambda url: f"https://api.allorigins.win/raw?url={quote(url, safe='')}"),
    "thingproxy": ProxyStrategy("thingproxy", lambda url: f"https://thingproxy.freeboard.io/fetch/{url}"),
    "cors-anywhere": ProxyStrategy("cors-anywhere", lambda url: f"https://cors-anywhere.herokuapp.com/{url}"),
}


def build_proxy_chain(names: list[str]) -> list[ProxyStrategy]:
    """Resolve strategy names to strategies, preserving order."""
    unknown = [name for name in names if name not in PROXY_STRATEGIES]
    if unknown:
        raise ValueError(f"Unknown proxy strategies: {', '.join(unknown)}")
    return [PROXY_STRATEGIES[name] for name in names]


def looks_like_feed(text: str) -> bool:
    """Cheap sniff for an XML feed or a JSON document."""
    if not text:
        return False
    t = text.lstrip().lower()
    if t.startswith("<?xml"):
        return True
    if ("<rss" in t) or ("<feed" in t) or ("<rdf:rdf" in t):
        return True
    if t.startswith("{"):
        try:
            return isinstance(json.loads(text), dict)
        except ValueError:
            return False
    return False


class InvalidResponse(Exception):
    """A 2xx response whose body failed validation."""

    pass


class ProxyChainTransport:
    """
    Fetch text over HTTP, falling back through an ordered proxy chain.

    Usage:
        transport = ProxyChainTransport()
        raw = await transport.fetch_raw(feed_url, validate=looks_like_feed)
    """

    def __init__(
        self,
        strategies: list[ProxyStrategy] | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.strategies = strategies if strategies is not None else build_proxy_chain(settings.proxy_chain)
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS
        self.user_agent = settings.USER_AGENT
        self._client = client

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, "
                "application/feed+json, application/json;q=0.9, */*;q=0.1",
            },
        )

    async def fetch_raw(self, url: str, validate: Callable[[str], bool] | None = None) -> str:
        """
        Return the body of url, trying each strategy in order.

        Raises:
            FetchError: every strategy failed
        """
        if self._client is not None:
            return await self._fetch_through_chain(self._client, url, validate)
        async with self._new_client() as client:
            return await self._fetch_through_chain(client, url, validate)

    async def _fetch_through_chain(
        self,
        client: httpx.AsyncClient,
        url: str,
        validate: Callable[[str], bool] | None,
    ) -> str:
        attempts: list[dict] = []
        last_error: Exception | None = None

        for strategy in self.strategies:
            target = strategy.rewrite(url)
            try:
                text = await asyncio.wait_for(self._get_text(client, target), timeout=self.timeout)
                if validate is not None and not validate(text):
                    raise InvalidResponse(f"response from {strategy.name} did not validate")
            except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError, InvalidResponse) as e:
                reason = str(e) or type(e).__name__
                logger.warning(
                    f"[FETCH] {strategy.name} failed for {url}: {reason}",
                    extra={"event": "fetch_attempt_failed", "strategy": strategy.name},
                )
                attempts.append({"strategy": strategy.name, "url": target, "error": reason})
                last_error = e
                continue

            if strategy.name != "direct":
                logger.info(f"[FETCH] {url} fetched via {strategy.name}")
            return text

        raise FetchError(
            url,
            f"Failed to fetch {url} after trying {len(attempts)} strategies",
            attempts=attempts,
            last_error=last_error,
        ) from last_error

    @staticmethod
    async def _get_text(client: httpx.AsyncClient, target: str) -> str:
        response = await client.get(target)
        response.raise_for_status()
        return response.text

    async def fetch_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Single-attempt JSON GET for platform REST APIs.

        Raises:
            FetchError: non-2xx, timeout, network error or a non-JSON body
        """
        if self._client is not None:
            return await self._get_json(self._client, url, params, headers)
        async with self._new_client() as client:
            return await self._get_json(client, url, params, headers)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> Any:
        try:
            response = await asyncio.wait_for(
                client.get(url, params=params, headers=headers),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"{url} returned HTTP {e.response.status_code}", last_error=e) from e
        except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError) as e:
            raise FetchError(url, f"Request to {url} failed: {str(e) or type(e).__name__}", last_error=e) from e
        except ValueError as e:
            raise FetchError(url, f"{url} did not return JSON", last_error=e) from e
