# tests/helpers.py
"""
Shared fakes and feed builders for tests.
"""

import httpx

from app.llm.base import LLMProvider
from app.services.transport import PROXY_STRATEGIES, ProxyChainTransport

USER_ID = "user-1"


class FakeLLMProvider(LLMProvider):
    """Returns a canned reply and records the prompts it was given."""

    def __init__(self, reply='{"categories": ["Technology"], "summary": "A short summary."}', error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    @property
    def name(self) -> str:
        return "fake"

    async def generate(self, prompt, *, model, temperature, max_tokens, system_prompt=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def make_transport(handler, strategies=("direct",), timeout=5.0) -> ProxyChainTransport:
    """ProxyChainTransport backed by an httpx.MockTransport handler."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ProxyChainTransport(
        strategies=[PROXY_STRATEGIES[name] for name in strategies],
        timeout=timeout,
        client=client,
    )


def serve(documents: dict[str, str]):
    """MockTransport handler serving fixed bodies by URL; anything else is a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = documents.get(str(request.url))
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=body)

    return handler


def rss_document(items: list[dict], title="Example Feed") -> str:
    """Minimal RSS 2.0 document. Item keys: title, link, guid, description, pubDate, encoded."""
    parts = []
    for item in items:
        fields = []
        for key in ("title", "link", "guid", "description", "pubDate"):
            if item.get(key):
                fields.append(f"<{key}>{item[key]}</{key}>")
        if item.get("encoded"):
            fields.append(f"<content:encoded><![CDATA[{item['encoded']}]]></content:encoded>")
        parts.append("<item>" + "".join(fields) + "</item>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">'
        f"<channel><title>{title}</title><link>https://example.com</link>"
        "<description>Example description</description>"
        + "".join(parts)
        + "</channel></rss>"
    )
