"""Tests for the HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fiatlux.api.main import app
from fiatlux.api.routes import _cached_corpus, get_settings
from fiatlux.config import Settings


@pytest.fixture
def client(data_root):
    """API client reading the sample data root."""
    app.dependency_overrides[get_settings] = lambda: Settings.load(data_root)
    yield TestClient(app)
    app.dependency_overrides.clear()
    _cached_corpus.cache_clear()


@pytest.fixture
def empty_client(tmp_path):
    """API client whose data root holds no corpora."""
    app.dependency_overrides[get_settings] = lambda: Settings.load(tmp_path)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["api"] == "/api/v1"

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["translations"] == {"kjv": True, "asv": True}

    def test_degraded_without_corpora(self, empty_client):
        body = empty_client.get("/api/v1/health").json()
        assert body["status"] == "degraded"


class TestVerses:
    """Tests for GET /verses."""

    def test_single_verse(self, client):
        """A verse comes back with its normalized reference and link."""
        response = client.get("/api/v1/verses", params={"ref": "john 3:16"})

        assert response.status_code == 200
        body = response.json()
        assert body["normalized"] == "John 3:16"
        assert body["translation"] == "kjv"
        verse = body["verses"][0]
        assert verse["book_ordinal"] == 43
        assert verse["text"].startswith("For God so loved the world")
        assert verse["url"] == "https://biblia.com/bible/kjv/john/3/16"

    def test_chapter(self, client):
        response = client.get("/api/v1/verses", params={"ref": "psalms.23"})

        assert response.status_code == 200
        verses = response.json()["verses"]
        assert [v["verse"] for v in verses] == [1, 2, 3, 4]

    def test_book(self, client):
        response = client.get("/api/v1/verses", params={"ref": "psalms"})

        assert response.status_code == 200
        references = [v["reference"] for v in response.json()["verses"]]
        assert references[0] == "Psalms 23:1"
        assert references[-1] == "Psalms 127:5"
        assert len(references) == 8

    def test_verse_range(self, client):
        response = client.get("/api/v1/verses", params={"ref": "Psalms 127:4-5"})

        assert response.status_code == 200
        assert [v["verse"] for v in response.json()["verses"]] == [4, 5]

    def test_other_translation(self, client):
        response = client.get(
            "/api/v1/verses", params={"ref": "psalms.23:1", "translation": "asv"}
        )

        assert response.status_code == 200
        assert response.json()["verses"][0]["text"].startswith("Jehovah")

    def test_not_found(self, client):
        response = client.get("/api/v1/verses", params={"ref": "psalms.150"})

        assert response.status_code == 404
        assert response.json()["detail"] == "chapter not found: Psalms 150"

    def test_bad_reference(self, client):
        response = client.get("/api/v1/verses", params={"ref": "hezekiah 1"})
        assert response.status_code == 400

    def test_unknown_translation(self, client):
        response = client.get(
            "/api/v1/verses", params={"ref": "john 3:16", "translation": "niv"}
        )
        assert response.status_code == 422

    def test_undecodable_corpus(self, data_root, client):
        (data_root / "asv.dat").write_bytes(b"01001001 In the \xff beginning\n")
        response = client.get(
            "/api/v1/verses", params={"ref": "genesis", "translation": "asv"}
        )

        assert response.status_code == 500
        assert "invalid UTF-8" in response.json()["detail"]

    def test_missing_corpus(self, empty_client):
        response = empty_client.get("/api/v1/verses", params={"ref": "john 3:16"})

        assert response.status_code == 503
        assert "Corpus not installed" in response.json()["detail"]


class TestSearch:
    """Tests for GET /search and GET /fuzzy."""

    def test_search(self, client):
        response = client.get("/api/v1/search", params={"q": "shepherd"})

        assert response.status_code == 200
        hits = response.json()["hits"]
        assert [h["reference"] for h in hits] == ["Psalms 23:1"]
        assert isinstance(hits[0]["score"], float)
        assert hits[0]["distance"] is None

    def test_search_scope(self, client):
        response = client.get(
            "/api/v1/search", params={"q": "children", "scope": "Psalms 127:4-5"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["scope"] == "Psalms 127:4-5"
        assert [h["reference"] for h in body["hits"]] == ["Psalms 127:4"]

    def test_search_bad_scope(self, client):
        response = client.get("/api/v1/search", params={"q": "God", "scope": "Austin"})
        assert response.status_code == 400

    def test_fuzzy(self, client):
        response = client.get("/api/v1/fuzzy", params={"q": "shepard", "limit": 1})

        assert response.status_code == 200
        hits = response.json()["hits"]
        assert hits[0]["reference"] == "Psalms 23:1"
        assert hits[0]["distance"] == 3

    def test_fuzzy_max_distance(self, client):
        response = client.get(
            "/api/v1/fuzzy", params={"q": "shepard", "max_distance": 0}
        )

        assert response.status_code == 200
        assert response.json()["hits"] == []
