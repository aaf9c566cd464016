# tests/test_normalizer.py
"""
Tests for per-source content normalization.
"""

from datetime import datetime, timezone

import pytest

from app.exceptions import NormalizationError
from app.models import SourceType
from app.services.feed_parser import FeedItem
from app.services.normalizer import NORMALIZERS, normalize


class TestWordPress:

    def test_embedded_post(self):
        post = {
            "id": 42,
            "date_gmt": "2024-01-15T12:00:00",
            "link": "https://blog.example.com/hello",
            "title": {"rendered": "Hello &amp; <em>welcome</em>"},
            "excerpt": {"rendered": "<p>Short excerpt</p>"},
            "content": {"rendered": "<p>Full post body</p>"},
            "categories": [3, 7],
            "_site": "https://blog.example.com",
            "_embedded": {
                "author": [{"name": "Alice"}],
                "wp:featuredmedia": [{"source_url": "https://blog.example.com/img.jpg"}],
            },
        }

        record = normalize(SourceType.WORDPRESS, post)

        assert record.source_type == "wordpress"
        assert record.source_id == "42"
        assert record.title == "Hello & welcome"
        assert record.description == "Short excerpt"
        assert record.content == "<p>Full post body</p>"
        assert record.author == "Alice"
        assert record.thumbnail_url == "https://blog.example.com/img.jpg"
        assert record.published_at == datetime(2024, 1, 15, 12, 0)
        assert record.categories == ["3", "7"]
        assert record.metadata == {"post_id": "42", "site": "https://blog.example.com"}

    def test_missing_fields_default(self):
        record = normalize("wordpress", {"id": 1})
        assert record.title == "Untitled"
        assert record.author == "Unknown"
        assert record.description == ""
        assert record.published_at is None

    def test_missing_id_raises(self):
        with pytest.raises(NormalizationError, match="wordpress"):
            normalize(SourceType.WORDPRESS, {"title": {"rendered": "No id"}})


class TestYouTube:

    def test_search_result(self):
        item = {
            "id": {"kind": "youtube#video", "videoId": "abc123"},
            "snippet": {
                "publishedAt": "2024-05-01T15:30:00Z",
                "channelId": "UC1",
                "title": "Video title",
                "description": "About the video",
                "channelTitle": "The Channel",
                "thumbnails": {"default": {"url": "d.jpg"}, "high": {"url": "h.jpg"}},
            },
        }

        record = normalize(SourceType.YOUTUBE, item)

        assert record.source_id == "abc123"
        assert record.link == "https://www.youtube.com/watch?v=abc123"
        assert record.content == "About the video"
        assert record.author == "The Channel"
        assert record.thumbnail_url == "h.jpg"
        assert record.published_at == datetime(2024, 5, 1, 15, 30)
        assert record.metadata == {"videoId": "abc123", "channelId": "UC1"}

    def test_missing_video_id_raises(self):
        with pytest.raises(NormalizationError):
            normalize(SourceType.YOUTUBE, {"id": {"kind": "youtube#channel"}, "snippet": {}})


class TestFacebook:

    def test_title_from_first_line(self):
        message = "A" * 150 + "\nSecond line"
        post = {
            "id": "123_456",
            "message": message,
            "created_time": "2024-06-01T10:00:00+0000",
            "permalink_url": "https://facebook.com/123/posts/456",
            "full_picture": "https://fb.example.com/p.jpg",
        }

        record = normalize(SourceType.FACEBOOK, post)

        assert record.title == "A" * 100
        assert record.content == message
        assert record.link == "https://facebook.com/123/posts/456"
        assert record.thumbnail_url == "https://fb.example.com/p.jpg"

    def test_post_without_message(self):
        record = normalize(SourceType.FACEBOOK, {"id": "9"})
        assert record.title == "Untitled"
        assert record.content == ""


class TestLinkedIn:

    def test_ugc_post(self):
        post = {
            "id": "urn:li:share:1",
            "author": "urn:li:person:abc",
            "created": {"time": 1704067200000},
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": "Big news today\nMore details"},
                    "media": [{"thumbnails": [{"url": "https://li.example.com/t.jpg"}]}],
                }
            },
        }

        record = normalize(SourceType.LINKEDIN, post)

        assert record.title == "Big news today"
        assert record.content == "Big news today\nMore details"
        assert record.published_at == datetime(2024, 1, 1, 0, 0)
        assert record.link == "https://www.linkedin.com/feed/update/urn:li:share:1"
        assert record.thumbnail_url == "https://li.example.com/t.jpg"


class TestRss:

    def test_feed_item(self):
        item = FeedItem(
            title="<b>Headline</b>",
            link="https://example.com/a",
            guid="g-1",
            pub_date=datetime(2024, 1, 1),
            content_encoded="<p>Body</p>",
            content_snippet="Teaser",
            description="<p>Teaser</p>",
            categories=["tech"],
        )

        record = normalize(SourceType.RSS, item)

        assert record.source_id == "g-1"
        assert record.title == "Headline"
        assert record.content == "<p>Body</p>"
        assert record.description == "Teaser"
        assert record.author == "Unknown"
        assert record.body == "<p>Body</p>"

    def test_guid_falls_back_to_link(self):
        record = normalize(SourceType.RSS, FeedItem(link="https://example.com/b"))
        assert record.source_id == "https://example.com/b"

    def test_missing_guid_and_link_raises(self):
        with pytest.raises(NormalizationError):
            normalize(SourceType.RSS, FeedItem(title="Orphan"))


class TestManual:

    def test_aware_timestamp_becomes_naive_utc(self):
        record = normalize(SourceType.MANUAL, {
            "source_id": "note-1",
            "title": "My note",
            "published_at": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            "metadata": {"origin": "clipboard"},
        })
        assert record.published_at == datetime(2024, 1, 1, 12, 0)
        assert record.metadata == {"origin": "clipboard"}


class TestDispatch:

    def test_every_source_type_has_a_normalizer(self):
        assert set(NORMALIZERS) == set(SourceType)

    def test_unknown_source_type(self):
        with pytest.raises(NormalizationError):
            normalize("myspace", {"id": 1})

    def test_non_mapping_payload(self):
        with pytest.raises(NormalizationError):
            normalize(SourceType.WORDPRESS, ["not", "a", "post"])
