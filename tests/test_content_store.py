# tests/test_content_store.py
"""
Tests for upserts and feed/article persistence.
"""

import uuid
from datetime import datetime

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError

from app import models
from app.exceptions import StoreError
from app.services.content_store import ADDED, UPDATED, ContentStore, store_errors
from app.services.deduper import Deduper
from app.services.normalizer import ContentRecord
from helpers import USER_ID


def rss_record(guid="g-1", **overrides) -> ContentRecord:
    values = dict(
        source_type="rss",
        source_id=guid,
        title="Headline",
        description="Teaser",
        content="Body",
        link=f"https://example.com/{guid}",
        published_at=datetime(2024, 1, 1),
    )
    values.update(overrides)
    return ContentRecord(**values)


def youtube_record(video_id="v-1", **overrides) -> ContentRecord:
    values = dict(
        source_type="youtube",
        source_id=video_id,
        title="Video",
        content="Description",
        metadata={"videoId": video_id},
    )
    values.update(overrides)
    return ContentRecord(**values)


@pytest.fixture
def store():
    return ContentStore()


class TestUpsertFeedArticle:

    def test_insert_then_update_is_idempotent(self, db, store, make_feed):
        feed = make_feed()

        first = store.upsert_feed_article(db, feed.id, rss_record())
        second = store.upsert_feed_article(db, feed.id, rss_record())

        assert first.action == ADDED
        assert first.created
        assert second.action == UPDATED
        assert second.id == first.id
        assert db.query(models.FeedArticle).count() == 1

    def test_new_articles_are_unsaved(self, db, store, make_feed):
        feed = make_feed()
        outcome = store.upsert_feed_article(db, feed.id, rss_record())

        article = store.get_feed_article(db, outcome.id)
        assert article.saved is False
        assert article.read is False
        assert article.transformed is False

    def test_update_preserves_user_state_and_content(self, db, store, make_feed):
        feed = make_feed()
        outcome = store.upsert_feed_article(db, feed.id, rss_record(content="Original body"))
        store.set_article_read(db, USER_ID, outcome.id, True)
        store.set_article_saved(db, USER_ID, outcome.id, True)

        store.upsert_feed_article(
            db,
            feed.id,
            rss_record(content="Changed body", ai_categories=["Politics"], ai_summary="New summary"),
        )

        db.expire_all()
        article = store.get_feed_article(db, outcome.id)
        assert article.read is True
        assert article.saved is True
        assert article.content == "Original body"
        assert article.ai_categories == ["Politics"]
        assert article.ai_summary == "New summary"

    def test_empty_classification_keeps_stored_values(self, db, store, make_feed):
        feed = make_feed()
        outcome = store.upsert_feed_article(
            db, feed.id, rss_record(ai_categories=["Science"], ai_summary="Kept")
        )

        store.upsert_feed_article(db, feed.id, rss_record())

        db.expire_all()
        article = store.get_feed_article(db, outcome.id)
        assert article.ai_categories == ["Science"]
        assert article.ai_summary == "Kept"

    def test_long_author_is_stored_whole(self, db, store, make_feed):
        feed = make_feed()
        author = "Staff writers, " * 40

        outcome = store.upsert_feed_article(db, feed.id, rss_record(author=author))

        assert store.get_feed_article(db, outcome.id).author == author
        assert isinstance(models.FeedArticle.__table__.c.author.type, Text)
        assert isinstance(models.ExternalContent.__table__.c.author.type, Text)

    def test_same_guid_in_two_feeds_is_two_articles(self, db, store, make_feed):
        feed_a = make_feed(url="https://a.example.com/feed")
        feed_b = make_feed(url="https://b.example.com/feed")

        a = store.upsert_feed_article(db, feed_a.id, rss_record())
        b = store.upsert_feed_article(db, feed_b.id, rss_record())

        assert a.created and b.created
        assert a.id != b.id

    def test_row_committed_by_another_session_is_updated(self, db, session_factory, store, make_feed):
        feed = make_feed()
        other = session_factory()
        try:
            first = store.upsert_feed_article(other, feed.id, rss_record())
        finally:
            other.close()

        second = store.upsert_feed_article(
            db, feed.id, rss_record(ai_categories=["Politics"], ai_summary="Refreshed")
        )

        assert second.action == UPDATED
        assert second.id == first.id
        article = db.query(models.FeedArticle).one()
        assert article.ai_categories == ["Politics"]
        assert article.ai_summary == "Refreshed"


class TestUpsertExternalContent:

    def test_new_imports_are_saved(self, db, store):
        outcome = store.upsert_external_content(db, USER_ID, youtube_record())

        content = store.get_external_content(db, outcome.id)
        assert outcome.created
        assert content.saved is True
        assert content.content_metadata == {"videoId": "v-1"}

    def test_reimport_updates_in_place(self, db, store):
        first = store.upsert_external_content(db, USER_ID, youtube_record())
        second = store.upsert_external_content(db, USER_ID, youtube_record(title="Renamed"))

        assert second.action == UPDATED
        assert second.id == first.id
        assert db.query(models.ExternalContent).count() == 1

    def test_conflict_refreshes_classification_only(self, db, session_factory, store):
        other = session_factory()
        try:
            first = store.upsert_external_content(other, USER_ID, youtube_record(title="Original"))
            other.query(models.ExternalContent).update({"transformed": True})
            other.commit()
        finally:
            other.close()

        second = store.upsert_external_content(
            db, USER_ID, youtube_record(title="Changed", ai_categories=["Music"], ai_summary="A song.")
        )

        assert second.action == UPDATED
        assert second.id == first.id
        content = db.query(models.ExternalContent).one()
        assert content.title == "Original"
        assert content.saved is True
        assert content.transformed is True
        assert content.ai_categories == ["Music"]
        assert content.ai_summary == "A song."

    def test_key_includes_user_and_source_type(self, db, store):
        store.upsert_external_content(db, USER_ID, youtube_record("x"))
        store.upsert_external_content(db, "someone-else", youtube_record("x"))
        store.upsert_external_content(
            db, USER_ID, ContentRecord(source_type="facebook", source_id="x")
        )

        assert db.query(models.ExternalContent).count() == 3


class TestFeeds:

    def test_list_feeds_by_user(self, db, store, make_feed):
        make_feed(url="https://a.example.com/feed")
        make_feed(url="https://b.example.com/feed", user_id="other")

        assert len(store.list_feeds(db)) == 2
        assert [f.url for f in store.list_feeds(db, user_id=USER_ID)] == ["https://a.example.com/feed"]

    def test_delete_feed_cascades_to_articles(self, db, store, make_feed):
        feed = make_feed()
        store.upsert_feed_article(db, feed.id, rss_record())

        assert store.delete_feed(db, USER_ID, feed.id) is True
        assert db.query(models.FeedArticle).count() == 0
        assert store.delete_feed(db, USER_ID, feed.id) is False

    def test_touch_feed_sets_last_fetched_at(self, db, store, make_feed):
        feed = make_feed()
        when = datetime(2024, 4, 1, 8, 0)

        store.touch_feed(db, feed.id, when=when)

        db.expire_all()
        assert store.get_feed(db, feed.id).last_fetched_at == when

    def test_update_category(self, db, store, make_feed):
        feed = make_feed()
        updated = store.update_feed_category(db, USER_ID, feed.id, "Tech")
        assert updated.category == "Tech"
        assert store.update_feed_category(db, "other", feed.id, "Tech") is None

    def test_list_feed_articles_newest_first(self, db, store, make_feed):
        feed = make_feed()
        store.upsert_feed_article(db, feed.id, rss_record("old", published_at=datetime(2023, 1, 1)))
        store.upsert_feed_article(db, feed.id, rss_record("undated", published_at=None))
        store.upsert_feed_article(db, feed.id, rss_record("new", published_at=datetime(2024, 6, 1)))

        guids = [a.guid for a in store.list_feed_articles(db, feed.id)]
        assert guids == ["new", "old", "undated"]

    def test_list_user_articles_by_category(self, db, store, make_feed):
        tech = make_feed(url="https://tech.example.com/feed", category="Tech")
        food = make_feed(url="https://food.example.com/feed", category="Food")
        store.upsert_feed_article(db, tech.id, rss_record("t"))
        store.upsert_feed_article(db, food.id, rss_record("f"))

        assert [a.guid for a in store.list_user_articles(db, USER_ID, category="Tech")] == ["t"]
        assert len(store.list_user_articles(db, USER_ID)) == 2


class TestFeedCategories:

    def test_list_is_per_user_and_alphabetical(self, db, store):
        store.add_feed_category(db, USER_ID, "Tech", color="#0055ff")
        store.add_feed_category(db, USER_ID, "Food")
        store.add_feed_category(db, "other", "Sports")

        categories = store.list_feed_categories(db, USER_ID)

        assert [c.name for c in categories] == ["Food", "Tech"]
        assert categories[1].color == "#0055ff"

    def test_duplicate_name_raises_store_error(self, db, store):
        store.add_feed_category(db, USER_ID, "Tech")

        with pytest.raises(StoreError):
            store.add_feed_category(db, USER_ID, "Tech")

        assert store.get_feed_category_by_name(db, USER_ID, "Tech") is not None

    def test_rename_moves_the_users_feeds(self, db, store, make_feed):
        category = store.add_feed_category(db, USER_ID, "Tech", color="#0055ff")
        mine = make_feed(url="https://a.example.com/feed", category="Tech")
        elsewhere = make_feed(url="https://b.example.com/feed", category="Food")
        theirs = make_feed(url="https://a.example.com/feed", user_id="other", category="Tech")

        renamed = store.rename_feed_category(db, USER_ID, category.id, "Technology")

        assert renamed.name == "Technology"
        assert renamed.color == "#0055ff"
        db.expire_all()
        assert db.get(models.Feed, mine.id).category == "Technology"
        assert db.get(models.Feed, elsewhere.id).category == "Food"
        assert db.get(models.Feed, theirs.id).category == "Tech"

    def test_rename_with_color(self, db, store):
        category = store.add_feed_category(db, USER_ID, "Tech")
        renamed = store.rename_feed_category(db, USER_ID, category.id, "Tech", color="#ff0000")
        assert renamed.color == "#ff0000"

    def test_rename_unknown_or_foreign_category(self, db, store):
        category = store.add_feed_category(db, USER_ID, "Tech")
        assert store.rename_feed_category(db, USER_ID, uuid.uuid4(), "X") is None
        assert store.rename_feed_category(db, "other", category.id, "X") is None


class TestCredentials:

    def test_set_and_replace(self, db, store):
        store.set_api_credential(db, USER_ID, "youtube", "key-1")
        store.set_api_credential(db, USER_ID, "youtube", "key-2")

        assert store.get_api_credential(db, USER_ID, "youtube") == "key-2"
        assert store.get_api_credential(db, USER_ID, "facebook") is None
        assert db.query(models.ApiCredential).count() == 1


class TestStoreErrors:

    def test_sqlalchemy_error_becomes_store_error(self, db):
        with pytest.raises(StoreError, match="Doing a thing failed"):
            with store_errors(db, "Doing a thing"):
                raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    def test_missing_feed_lookup_returns_none(self, db, store):
        assert store.get_feed(db, uuid.uuid4()) is None


class TestDeduper:

    def test_feed_article_key_falls_back_to_link(self):
        record = ContentRecord(source_type="rss", source_id="", link="https://example.com/x")
        feed_id = uuid.uuid4()
        assert Deduper.feed_article_key(feed_id, record) == (feed_id, "https://example.com/x")

    def test_find_feed_article(self, db, store, make_feed):
        feed = make_feed()
        deduper = Deduper()
        assert deduper.find_feed_article(db, feed.id, rss_record()) is None

        outcome = store.upsert_feed_article(db, feed.id, rss_record())

        assert deduper.find_feed_article(db, feed.id, rss_record()).id == outcome.id

    def test_find_external_content(self, db, store):
        deduper = Deduper()
        assert deduper.find_external_content(db, USER_ID, youtube_record()) is None

        outcome = store.upsert_external_content(db, USER_ID, youtube_record())

        assert deduper.find_external_content(db, USER_ID, youtube_record()).id == outcome.id
        assert deduper.find_external_content(db, "other", youtube_record()) is None
