# tests/test_api.py
"""
Contract tests for API responses.
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from app import models
from app.database import get_db
from app.dependencies import (
    get_body_extractor,
    get_bulk_refresh_driver,
    get_ingestion_service,
)
from app.main import app
from app.services.body_extractor import ExtractionFailureReason, ExtractionResult
from app.services.bulk_refresh import BulkRefreshDriver
from app.services.ingestion import IngestionService
from app.services.llm_classifier import ClassificationEnricher
from helpers import USER_ID, make_transport, rss_document, serve

FEED_URL = "https://example.com/feed.xml"
FEED = rss_document(
    [
        {"title": "One", "guid": "1", "link": "https://example.com/1", "description": "First"},
        {"title": "Two", "guid": "2", "link": "https://example.com/2", "description": "Second"},
    ],
    title="Example Feed",
)

USER_HEADERS = {"X-User-Id": USER_ID}
ADMIN_HEADERS = {"X-API-Key": "test-admin-key"}


class FakeExtractor:
    def __init__(self, result: ExtractionResult):
        self.result = result
        self.urls = []

    def extract(self, url):
        self.urls.append(url)
        return self.result


@pytest.fixture
def extractor():
    return FakeExtractor(ExtractionResult(
        success=True,
        body="The complete article text.",
        char_count=26,
        extractor_used="trafilatura",
    ))


@pytest.fixture
def client(session_factory, extractor):
    """Test client wired to the per-test database and a mocked network."""
    ingestion = IngestionService(
        session_factory=session_factory,
        transport=make_transport(serve({FEED_URL: FEED})),
        classifier=ClassificationEnricher(provider=None, use_default_provider=False),
    )

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ingestion_service] = lambda: ingestion
    app.dependency_overrides[get_bulk_refresh_driver] = lambda: BulkRefreshDriver(
        ingestion=ingestion, session_factory=session_factory
    )
    app.dependency_overrides[get_body_extractor] = lambda: extractor
    yield TestClient(app)
    app.dependency_overrides.clear()


def add_feed(client) -> dict:
    response = client.post("/v1/feeds", json={"url": FEED_URL, "category": "Tech"}, headers=USER_HEADERS)
    assert response.status_code == 200
    return response.json()


class TestHealthEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestFeedEndpoints:

    def test_requires_user_id(self, client):
        assert client.get("/v1/feeds").status_code == 401

    def test_add_feed_ingests_items(self, client):
        data = add_feed(client)

        assert data["success"] is True
        assert data["data"]["feed"]["title"] == "Example Feed"
        assert data["data"]["feed"]["category"] == "Tech"
        assert data["data"]["ingest"]["added_count"] == 2

    def test_add_existing_feed(self, client):
        add_feed(client)
        data = add_feed(client)

        assert data["success"] is True
        assert data["message"] == "Feed already exists"

    def test_add_unreachable_feed(self, client):
        response = client.post("/v1/feeds", json={"url": "https://nowhere.example.com/rss"}, headers=USER_HEADERS)

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is False
        assert "could not be parsed" in data["error"]

    def test_add_malformed_feed_url(self, client):
        response = client.post("/v1/feeds", json={"url": "http://[::1/feed"}, headers=USER_HEADERS)

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert client.get("/v1/feeds", headers=USER_HEADERS).json()["data"] == []

    def test_list_and_articles(self, client):
        feed_id = add_feed(client)["data"]["feed"]["id"]

        feeds = client.get("/v1/feeds", headers=USER_HEADERS).json()["data"]
        assert [f["id"] for f in feeds] == [feed_id]
        assert client.get("/v1/feeds", headers={"X-User-Id": "other"}).json()["data"] == []

        articles = client.get(f"/v1/feeds/{feed_id}/articles", headers=USER_HEADERS).json()["data"]
        assert {a["guid"] for a in articles} == {"1", "2"}
        assert all(a["saved"] is False for a in articles)

    def test_refresh_feed(self, client):
        feed_id = add_feed(client)["data"]["feed"]["id"]

        data = client.post(f"/v1/feeds/{feed_id}/refresh", headers=USER_HEADERS).json()

        assert data["success"] is True
        assert data["data"]["added_count"] == 0
        assert data["data"]["skipped_count"] == 2

    def test_update_category_and_delete(self, client):
        feed_id = add_feed(client)["data"]["feed"]["id"]

        data = client.patch(f"/v1/feeds/{feed_id}/category", json={"category": "News"}, headers=USER_HEADERS).json()
        assert data["data"]["category"] == "News"

        assert client.delete(f"/v1/feeds/{feed_id}", headers=USER_HEADERS).json()["success"] is True
        assert client.delete(f"/v1/feeds/{feed_id}", headers=USER_HEADERS).status_code == 404

    def test_feed_categories(self, client):
        feed_id = add_feed(client)["data"]["feed"]["id"]

        created = client.post("/v1/feeds/categories", json={"name": "Tech", "color": "#0055ff"}, headers=USER_HEADERS).json()
        assert created["success"] is True
        category_id = created["data"]["id"]

        duplicate = client.post("/v1/feeds/categories", json={"name": "Tech"}, headers=USER_HEADERS).json()
        assert duplicate["success"] is False
        assert "already exists" in duplicate["error"]

        renamed = client.patch(
            f"/v1/feeds/categories/{category_id}", json={"name": "Technology"}, headers=USER_HEADERS
        ).json()
        assert renamed["data"]["name"] == "Technology"
        assert renamed["data"]["color"] == "#0055ff"

        listed = client.get("/v1/feeds/categories", headers=USER_HEADERS).json()["data"]
        assert [c["name"] for c in listed] == ["Technology"]
        feeds = client.get("/v1/feeds", headers=USER_HEADERS).json()["data"]
        assert [(f["id"], f["category"]) for f in feeds] == [(feed_id, "Technology")]

    def test_rename_unknown_category(self, client):
        response = client.patch(f"/v1/feeds/categories/{uuid.uuid4()}", json={"name": "X"}, headers=USER_HEADERS)
        assert response.status_code == 404

    def test_unknown_feed(self, client):
        response = client.post(f"/v1/feeds/{uuid.uuid4()}/refresh", headers=USER_HEADERS)
        assert response.status_code == 404

    def test_curated_feeds(self, client):
        categories = client.get("/v1/feeds/curated").json()["data"]
        assert any(c["category"] == "Technology" for c in categories)

        tech = client.get("/v1/feeds/curated/technology").json()
        assert tech["success"] is True
        assert all(f["url"] for f in tech["data"])

        assert client.get("/v1/feeds/curated/knitting").json()["success"] is False


class TestArticleEndpoints:

    def first_article_id(self, client) -> str:
        add_feed(client)
        return client.get("/v1/articles", headers=USER_HEADERS).json()["data"][0]["id"]

    def test_list_by_category(self, client):
        add_feed(client)

        assert len(client.get("/v1/articles?category=Tech", headers=USER_HEADERS).json()["data"]) == 2
        assert client.get("/v1/articles?category=Food", headers=USER_HEADERS).json()["data"] == []

    def test_save_and_read(self, client):
        article_id = self.first_article_id(client)

        saved = client.post(f"/v1/articles/{article_id}/saved", json={"saved": True}, headers=USER_HEADERS).json()
        read = client.post(f"/v1/articles/{article_id}/read", json={}, headers=USER_HEADERS).json()

        assert saved["data"]["saved"] is True
        assert read["data"]["read"] is True
        assert read["data"]["saved"] is True

    def test_full_content(self, client, extractor, session_factory):
        article_id = self.first_article_id(client)

        data = client.post(f"/v1/articles/{article_id}/full-content", headers=USER_HEADERS).json()

        assert data["success"] is True
        assert data["data"]["extractor_used"] == "trafilatura"
        assert extractor.urls and extractor.urls[0].startswith("https://example.com/")
        db = session_factory()
        try:
            article = db.get(models.FeedArticle, uuid.UUID(article_id))
            assert article.content == "The complete article text."
            assert article.full_content_fetched is True
        finally:
            db.close()

    def test_full_content_failure(self, client, extractor):
        extractor.result = ExtractionResult(success=False, failure_reason=ExtractionFailureReason.DOWNLOAD_FAILED)
        article_id = self.first_article_id(client)

        data = client.post(f"/v1/articles/{article_id}/full-content", headers=USER_HEADERS).json()

        assert data["success"] is False
        assert "download_failed" in data["error"]

    def test_other_users_article(self, client):
        article_id = self.first_article_id(client)
        response = client.post(f"/v1/articles/{article_id}/saved", json={"saved": True}, headers={"X-User-Id": "x"})
        assert response.status_code == 404


class TestContentEndpoints:

    def test_manual_content_and_listing(self, client):
        response = client.post(
            "/v1/content/manual",
            json={"source_id": "note-1", "title": "My note", "content": "Something worth keeping"},
            headers=USER_HEADERS,
        )
        assert response.json()["data"]["added_count"] == 1

        items = client.get("/v1/content", headers=USER_HEADERS).json()["data"]
        assert len(items) == 1
        assert items[0]["source_type"] == "manual"
        assert items[0]["saved"] is True
        assert client.get("/v1/content?source_type=youtube", headers=USER_HEADERS).json()["data"] == []

    def test_import_without_credential(self, client):
        data = client.post("/v1/content/import", json={"source_type": "facebook"}, headers=USER_HEADERS).json()

        assert data["success"] is False
        assert "access token" in data["error"]

    def test_credentials(self, client):
        ok = client.put("/v1/content/credentials", json={"service": "youtube", "api_key": "k"}, headers=USER_HEADERS)
        assert ok.json()["success"] is True

        bad = client.put("/v1/content/credentials", json={"service": "manual", "api_key": "k"}, headers=USER_HEADERS)
        assert bad.status_code == 400

    def test_transformations(self, client):
        client.post("/v1/content/manual", json={"source_id": "n1", "title": "Note"}, headers=USER_HEADERS)
        content_id = client.get("/v1/content", headers=USER_HEADERS).json()["data"][0]["id"]

        created = client.post(
            "/v1/content/transformations",
            json={"original_content_id": content_id, "transformation_type": "summary", "result_data": {"text": "t"}},
            headers=USER_HEADERS,
        ).json()
        assert created["success"] is True

        listed = client.get(f"/v1/content/{content_id}/transformations", headers=USER_HEADERS).json()["data"]
        assert [t["transformation_type"] for t in listed] == ["summary"]
        assert client.get("/v1/content", headers=USER_HEADERS).json()["data"][0]["transformed"] is True

    def test_transformation_of_unknown_content(self, client):
        response = client.post(
            "/v1/content/transformations",
            json={"original_content_id": str(uuid.uuid4()), "transformation_type": "summary"},
            headers=USER_HEADERS,
        )
        assert response.status_code == 404


class TestAdminEndpoints:

    def test_refresh_all_requires_key(self, client):
        assert client.post("/v1/admin/refresh-all").status_code == 401
        assert client.post("/v1/admin/refresh-all", headers={"X-API-Key": "wrong"}).status_code == 401

    def test_refresh_all(self, client):
        add_feed(client)

        data = client.post("/v1/admin/refresh-all", headers=ADMIN_HEADERS).json()

        assert data["success"] is True
        assert data["data"]["total_sources"] == 1
        assert data["data"]["successful_sources"] == 1
        assert data["data"]["per_source_results"][0]["items_skipped"] == 2

    def test_refresh_all_without_feeds(self, client):
        data = client.post("/v1/admin/refresh-all", headers=ADMIN_HEADERS).json()
        assert data["success"] is True
        assert data["data"]["total_sources"] == 0
        assert data["message"] == "No feeds to refresh"

    def test_cleanup_dry_run(self, client):
        add_feed(client)

        data = client.post("/v1/admin/cleanup", json={"days": 30, "dry_run": True}, headers=ADMIN_HEADERS).json()

        assert data["success"] is True
        assert data["data"]["dry_run"] is True
        assert data["data"]["articles_deleted"] == 0
