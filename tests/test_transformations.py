# tests/test_transformations.py
"""
Tests for saving transformations and the transformed flag.
"""

import uuid

from app import models
from app.services import transformations
from helpers import USER_ID


def add_article(db, feed):
    article = models.FeedArticle(feed_id=feed.id, guid="g-1", title="Article")
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


class TestSaveTransformation:

    def test_flags_feed_article(self, db, make_feed):
        article = add_article(db, make_feed())

        saved = transformations.save_transformation(
            db,
            USER_ID,
            article.id,
            "summary",
            {"text": "Short version"},
            title="Summary",
        )

        assert saved.transformation_type == "summary"
        assert saved.result_data == {"text": "Short version"}
        db.expire_all()
        assert db.get(models.FeedArticle, article.id).transformed is True

    def test_flags_external_content(self, db):
        content = models.ExternalContent(user_id=USER_ID, source_type="manual", source_id="n1")
        db.add(content)
        db.commit()

        transformations.save_transformation(db, USER_ID, content.id, "thread", ["post 1", "post 2"])

        db.expire_all()
        assert db.get(models.ExternalContent, content.id).transformed is True

    def test_unknown_origin(self, db):
        assert transformations.save_transformation(db, USER_ID, uuid.uuid4(), "summary", {}) is None
        assert db.query(models.TransformedContent).count() == 0

    def test_other_users_content_is_not_an_origin(self, db, make_feed):
        article = add_article(db, make_feed(user_id="someone-else"))
        assert transformations.save_transformation(db, USER_ID, article.id, "summary", {}) is None

    def test_list_transformations(self, db, make_feed):
        article = add_article(db, make_feed())
        transformations.save_transformation(db, USER_ID, article.id, "summary", {})
        transformations.save_transformation(db, USER_ID, article.id, "tweet", {})

        listed = transformations.list_transformations(db, USER_ID, article.id)

        assert {t.transformation_type for t in listed} == {"summary", "tweet"}
        assert transformations.list_transformations(db, "other", article.id) == []
