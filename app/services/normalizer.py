# app/services/normalizer.py
"""
Content normalization: source payload -> ContentRecord.

One pure function per source type, registered in NORMALIZERS. No I/O and no
shared state. A payload missing its source identifier raises
NormalizationError; every other field degrades to a display-safe default
("Untitled", "Unknown", "", None for absent dates).
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from app.exceptions import NormalizationError
from app.models import SourceType
from app.services.feed_parser import FeedItem
from app.utils.content_sanitizer import clean_title, strip_html
from app.utils.datetime_utils import from_epoch_millis, parse_iso_datetime

DEFAULT_AUTHOR = "Unknown"
POST_TITLE_MAX_CHARS = 100


@dataclass
class ContentRecord:
    """Canonical in-memory representation of any ingested item."""

    source_type: str
    source_id: str
    title: str = "Untitled"
    description: str = ""
    content: str = ""
    link: str = ""
    published_at: datetime | None = None
    author: str = DEFAULT_AUTHOR
    thumbnail_url: str | None = None
    categories: list[str] = field(default_factory=list)
    ai_categories: list[str] = field(default_factory=list)
    ai_summary: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    saved: bool = False

    @property
    def body(self) -> str:
        """Text used for classification."""
        return self.content or self.description


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _author(value: Any) -> str:
    return strip_html(_text(value)) or DEFAULT_AUTHOR


def _require_id(source_type: SourceType, value: Any, label: str) -> str:
    source_id = _text(value).strip()
    if not source_id:
        raise NormalizationError(source_type.value, f"missing {label}")
    return source_id


# -----------------------------------------------------------------------------
# Per-source normalizers
# -----------------------------------------------------------------------------

def normalize_wordpress(post: dict) -> ContentRecord:
    """WordPress REST API post (/wp-json/wp/v2/posts, optionally with _embed)."""
    source_id = _require_id(SourceType.WORDPRESS, post.get("id"), "post id")
    embedded = post.get("_embedded") or {}

    author = post.get("author_name")
    if not author:
        embedded_authors = embedded.get("author") or []
        if embedded_authors and isinstance(embedded_authors[0], dict):
            author = embedded_authors[0].get("name")

    thumbnail = post.get("featured_media_url")
    if not thumbnail:
        media = embedded.get("wp:featuredmedia") or []
        if media and isinstance(media[0], dict):
            thumbnail = media[0].get("source_url")

    return ContentRecord(
        source_type=SourceType.WORDPRESS.value,
        source_id=source_id,
        title=clean_title((post.get("title") or {}).get("rendered")),
        description=strip_html((post.get("excerpt") or {}).get("rendered")),
        content=_text((post.get("content") or {}).get("rendered")),
        link=_text(post.get("link")),
        published_at=parse_iso_datetime(post.get("date_gmt")) or parse_iso_datetime(post.get("date")),
        author=_author(author),
        thumbnail_url=thumbnail or None,
        categories=[str(c) for c in post.get("categories") or []],
        metadata={"post_id": source_id, "site": post.get("_site") or ""},
    )


def normalize_youtube(item: dict) -> ContentRecord:
    """YouTube Data API v3 search result item."""
    ids = item.get("id")
    video_id = ids.get("videoId") if isinstance(ids, dict) else ids
    source_id = _require_id(SourceType.YOUTUBE, video_id, "videoId")
    snippet = item.get("snippet") or {}
    thumbnails = snippet.get("thumbnails") or {}
    thumbnail = (thumbnails.get("high") or {}).get("url") or (thumbnails.get("default") or {}).get("url")
    description = _text(snippet.get("description"))

    return ContentRecord(
        source_type=SourceType.YOUTUBE.value,
        source_id=source_id,
        title=clean_title(snippet.get("title")),
        description=description,
        # The search API has no transcript or long-form body
        content=description,
        link=f"https://www.youtube.com/watch?v={source_id}",
        published_at=parse_iso_datetime(snippet.get("publishedAt")),
        author=_author(snippet.get("channelTitle")),
        thumbnail_url=thumbnail,
        metadata={"videoId": source_id, "channelId": snippet.get("channelId")},
    )


def normalize_facebook(post: dict) -> ContentRecord:
    """Facebook Graph API post (id, message, created_time, permalink_url, full_picture, from)."""
    source_id = _require_id(SourceType.FACEBOOK, post.get("id"), "post id")
    message = _text(post.get("message") or post.get("story"))
    first_line = message.strip().splitlines()[0] if message.strip() else ""

    return ContentRecord(
        source_type=SourceType.FACEBOOK.value,
        source_id=source_id,
        title=clean_title(first_line[:POST_TITLE_MAX_CHARS]),
        description=message,
        content=message,
        link=_text(post.get("permalink_url")),
        published_at=parse_iso_datetime(post.get("created_time")),
        author=_author((post.get("from") or {}).get("name")),
        thumbnail_url=post.get("full_picture") or None,
        metadata={"post_id": source_id},
    )


def normalize_linkedin(post: dict) -> ContentRecord:
    """LinkedIn UGC post (/v2/ugcPosts)."""
    source_id = _require_id(SourceType.LINKEDIN, post.get("id"), "post id")
    share = (post.get("specificContent") or {}).get("com.linkedin.ugc.ShareContent") or {}
    text = _text((share.get("shareCommentary") or {}).get("text"))
    first_line = text.strip().splitlines()[0] if text.strip() else ""

    thumbnail = None
    for media in share.get("media") or []:
        thumbs = media.get("thumbnails") or []
        if thumbs and thumbs[0].get("url"):
            thumbnail = thumbs[0]["url"]
            break

    return ContentRecord(
        source_type=SourceType.LINKEDIN.value,
        source_id=source_id,
        title=clean_title(first_line[:POST_TITLE_MAX_CHARS]),
        description=text,
        content=text,
        link=f"https://www.linkedin.com/feed/update/{source_id}",
        published_at=from_epoch_millis((post.get("created") or {}).get("time")),
        author=_author(post.get("author")),
        thumbnail_url=thumbnail,
        metadata={"urn": source_id},
    )


def normalize_rss(item: FeedItem) -> ContentRecord:
    """A parsed feed entry. The natural id is the guid, falling back to the link."""
    source_id = _require_id(SourceType.RSS, item.guid or item.link, "guid and link")

    return ContentRecord(
        source_type=SourceType.RSS.value,
        source_id=source_id,
        title=clean_title(item.title),
        description=item.content_snippet or strip_html(item.description),
        content=item.body,
        link=item.link,
        published_at=item.pub_date,
        author=_author(item.author),
        thumbnail_url=item.thumbnail_url,
        categories=list(item.categories),
    )


def normalize_manual(payload: dict) -> ContentRecord:
    """A record entered by the user directly."""
    source_id = _require_id(SourceType.MANUAL, payload.get("source_id") or payload.get("id"), "source_id")
    published_at = payload.get("published_at")
    if not isinstance(published_at, datetime):
        published_at = parse_iso_datetime(published_at)
    elif published_at.tzinfo is not None:
        published_at = published_at.astimezone(timezone.utc).replace(tzinfo=None)

    return ContentRecord(
        source_type=SourceType.MANUAL.value,
        source_id=source_id,
        title=clean_title(payload.get("title")),
        description=_text(payload.get("description")),
        content=_text(payload.get("content")),
        link=_text(payload.get("link")),
        published_at=published_at,
        author=_author(payload.get("author")),
        thumbnail_url=payload.get("thumbnail_url") or None,
        categories=[str(c) for c in payload.get("categories") or []],
        metadata=dict(payload.get("metadata") or {}),
    )


NORMALIZERS: dict[SourceType, Callable[[Any], ContentRecord]] = {
    SourceType.WORDPRESS: normalize_wordpress,
    SourceType.YOUTUBE: normalize_youtube,
    SourceType.FACEBOOK: normalize_facebook,
    SourceType.LINKEDIN: normalize_linkedin,
    SourceType.RSS: normalize_rss,
    SourceType.MANUAL: normalize_manual,
}


def normalize(source_type: SourceType | str, payload: Any) -> ContentRecord:
    """
    Map a raw payload to a ContentRecord.

    Raises:
        NormalizationError: unknown source type, unusable payload, or missing identifier
    """
    try:
        source_type = SourceType(source_type)
    except ValueError as e:
        raise NormalizationError(str(source_type), "unknown source type") from e

    if source_type != SourceType.RSS and not isinstance(payload, dict):
        raise NormalizationError(source_type.value, f"expected an object, got {type(payload).__name__}")

    try:
        return NORMALIZERS[source_type](payload)
    except NormalizationError:
        raise
    except (AttributeError, TypeError) as e:
        raise NormalizationError(source_type.value, f"malformed payload: {e}") from e
