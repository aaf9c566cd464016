# app/services/feed_parser.py
"""
Feed parsing for RSS 0.9x/1.0/2.0, Atom and JSON Feed documents.

RSS and Atom go through feedparser; JSON Feed (and any JSON document with an
"items" array) is read directly. Each entry becomes a FeedItem that keeps
every body candidate the feed offered, so the caller can resolve the body
with a single priority rule:

    content_encoded -> content -> content_snippet -> description -> ""
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime

import feedparser

from app.exceptions import ParseError
from app.utils.content_sanitizer import strip_html
from app.utils.datetime_utils import from_struct_time, parse_feed_datetime

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass
class FeedItem:
    """One entry of a parsed feed. Absent fields are None (pub_date) or empty."""

    title: str = ""
    link: str = ""
    guid: str = ""
    pub_date: datetime | None = None
    author: str = ""
    categories: list[str] = field(default_factory=list)
    thumbnail_url: str | None = None
    content_encoded: str = ""
    content: str = ""
    content_snippet: str = ""
    description: str = ""

    @property
    def body(self) -> str:
        return self.content_encoded or self.content or self.content_snippet or self.description or ""


@dataclass
class ParsedFeed:
    title: str = ""
    description: str = ""
    link: str = ""
    items: list[FeedItem] = field(default_factory=list)


def parse_feed(raw: str | bytes) -> ParsedFeed:
    """
    Parse a raw feed document.

    Raises:
        ParseError: the document is not a readable feed
    """
    if raw is None:
        raise ParseError("Empty feed document")

    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    if not text.strip():
        raise ParseError("Empty feed document")

    if text.lstrip().startswith("{"):
        return _parse_json_feed(text)
    return _parse_xml_feed(raw)


# -----------------------------------------------------------------------------
# RSS / Atom
# -----------------------------------------------------------------------------

def _parse_xml_feed(raw: str | bytes) -> ParsedFeed:
    parsed = feedparser.parse(raw)

    # feedparser is lenient: a bozo flag alone is not fatal as long as it
    # recognised a feed format or recovered entries.
    if not parsed.entries and not parsed.get("version"):
        reason = parsed.get("bozo_exception") or "document is not an RSS or Atom feed"
        raise ParseError(f"Invalid feed: {reason}")

    if parsed.get("bozo"):
        logger.debug(f"[PARSE] Recovered from malformed feed: {parsed.get('bozo_exception')}")

    channel = parsed.feed
    return ParsedFeed(
        title=strip_html(channel.get("title")),
        description=strip_html(channel.get("subtitle") or channel.get("description")),
        link=channel.get("link") or "",
        items=[_item_from_entry(entry) for entry in parsed.entries],
    )


def _item_from_entry(entry) -> FeedItem:
    content_encoded = ""
    content = ""
    for block in entry.get("content") or []:
        value = block.get("value") or ""
        if not value:
            continue
        if block.get("type") in HTML_CONTENT_TYPES:
            content_encoded = content_encoded or value
        else:
            content = content or value

    description = entry.get("summary") or entry.get("description") or ""
    link = entry.get("link") or ""

    return FeedItem(
        title=entry.get("title") or "",
        link=link,
        guid=entry.get("id") or link,
        pub_date=from_struct_time(entry.get("published_parsed")) or from_struct_time(entry.get("updated_parsed")),
        author=entry.get("author") or "",
        categories=[tag.get("term") for tag in entry.get("tags") or [] if tag.get("term")],
        thumbnail_url=_thumbnail_from_entry(entry),
        content_encoded=content_encoded,
        content=content,
        content_snippet=strip_html(description),
        description=description,
    )


def _thumbnail_from_entry(entry) -> str | None:
    for thumb in entry.get("media_thumbnail") or []:
        if thumb.get("url"):
            return thumb["url"]
    for media in entry.get("media_content") or []:
        if media.get("url") and (media.get("medium") == "image" or (media.get("type") or "").startswith("image/")):
            return media["url"]
    for enclosure in entry.get("enclosures") or []:
        if (enclosure.get("type") or "").startswith("image/") and enclosure.get("href"):
            return enclosure["href"]
    return None


# -----------------------------------------------------------------------------
# JSON Feed
# -----------------------------------------------------------------------------

def _parse_json_feed(text: str) -> ParsedFeed:
    try:
        document = json.loads(text)
    except ValueError as e:
        raise ParseError(f"Invalid JSON feed: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("items"), list):
        raise ParseError("Invalid JSON feed: missing items array")

    items = [_item_from_json(item) for item in document["items"] if isinstance(item, dict)]
    return ParsedFeed(
        title=strip_html(document.get("title")),
        description=strip_html(document.get("description")),
        link=document.get("home_page_url") or document.get("link") or "",
        items=items,
    )


def _item_from_json(item: dict) -> FeedItem:
    link = item.get("url") or item.get("link") or ""
    guid = item.get("id") or item.get("guid") or link
    summary = item.get("summary") or item.get("description") or ""

    author = ""
    authors = item.get("authors")
    if isinstance(authors, list) and authors and isinstance(authors[0], dict):
        author = authors[0].get("name") or ""
    elif isinstance(item.get("author"), dict):
        author = item["author"].get("name") or ""
    elif isinstance(item.get("author"), str):
        author = item["author"]

    tags = item.get("tags") or item.get("categories") or []

    return FeedItem(
        title=item.get("title") or "",
        link=link,
        guid=str(guid) if guid else "",
        pub_date=parse_feed_datetime(item.get("date_published") or item.get("pubDate")),
        author=author,
        categories=[str(tag) for tag in tags if isinstance(tag, str)],
        thumbnail_url=item.get("image") or item.get("banner_image"),
        content_encoded=item.get("content_html") or "",
        content=item.get("content_text") or item.get("content") or "",
        content_snippet=strip_html(summary),
        description=summary,
    )
