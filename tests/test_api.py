"""Tests for the HTTP routes."""

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from ragstore.config import settings
from ragstore.errors import PersistenceError, ProviderError
from ragstore.main import create_app
from ragstore.rag.bootstrap import SEED_CORPUS

ADMIN = {"X-Admin-Token": "secret"}


@pytest.fixture
def admin_token(monkeypatch):
    monkeypatch.setattr(settings, "admin_token", SecretStr("secret"))


@pytest.fixture
def client(store, admin_token):
    with TestClient(create_app(vector_store=store)) as test_client:
        yield test_client


class TestHealthAndStatus:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_status_before_retrieval(self, client):
        body = client.get("/api/v1/status").json()
        assert body == {"documents": 0, "dimension": None, "retrieval": "uninitialized"}


class TestAdminRoutes:
    def test_requires_token(self, client):
        response = client.post("/admin/documents", json={"texts": ["a"]})
        assert response.status_code == 403

    def test_add_documents(self, client, store):
        response = client.post(
            "/admin/documents",
            json={"texts": ["a", "b"], "metadatas": [{"tag": 1}, None]},
            headers=ADMIN,
        )
        assert response.status_code == 200
        assert response.json() == {"status": "completed", "added": 2, "total": 2}
        assert [d.metadata for d in store.documents] == [{"tag": 1}, None]

    def test_mismatched_metadata_is_bad_request(self, client, store):
        response = client.post(
            "/admin/documents",
            json={"texts": ["a", "b"], "metadatas": [{"tag": 1}]},
            headers=ADMIN,
        )
        assert response.status_code == 400
        assert len(store) == 0

    def test_provider_failure_is_bad_gateway(self, client, store, embeddings):
        embeddings.fail_with = ProviderError("quota")
        response = client.post("/admin/documents", json={"texts": ["a"]}, headers=ADMIN)
        assert response.status_code == 502
        assert len(store) == 0

    def test_persistence_failure_reports_not_durable(self, client, store, monkeypatch):
        def broken_save(documents):
            raise PersistenceError("disk full")

        monkeypatch.setattr(store.storage, "save", broken_save)
        response = client.post("/admin/documents", json={"texts": ["a"]}, headers=ADMIN)
        assert response.status_code == 500
        assert "not durable" in response.json()["detail"]

    def test_clear(self, client, store):
        store.add_documents(["a", "b"])
        response = client.post("/admin/clear", headers=ADMIN)
        assert response.status_code == 200
        assert len(store) == 0


class TestRetrievalRoutes:
    def test_search_seeds_then_searches(self, client):
        response = client.post("/api/v1/search", json={"query": "embeddings", "k": 2})
        assert response.status_code == 200
        body = response.json()
        assert len(body["results"]) == 2
        assert body["results"][0]["text"] == SEED_CORPUS[0]
        assert client.get("/api/v1/status").json()["retrieval"] == "available"

    def test_search_with_retrieval_unavailable(self, client, embeddings):
        embeddings.fail_with = ProviderError("no key")
        response = client.post("/api/v1/search", json={"query": "anything"})
        assert response.status_code == 200
        assert response.json()["results"] == []
        assert client.get("/api/v1/status").json()["retrieval"] == "unavailable"

    def test_blank_query_rejected(self, client):
        assert client.post("/api/v1/search", json={"query": "   "}).status_code == 400

    def test_context(self, client, store):
        store.add_documents(["alpha", "beta"])
        response = client.post(
            "/api/v1/context",
            json={"messages": [{"role": "user", "content": [{"type": "text", "text": "tell me"}]}]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "tell me"
        assert [d["text"] for d in body["documents"]] == ["alpha", "beta"]
        assert "alpha" in body["system_prompt"]
