"""Tests for the seed initializer and the one-time retrieval gate."""

import pytest

from ragstore.errors import InitializationUnavailable, PersistenceError, ProviderError
from ragstore.rag.bootstrap import SEED_CORPUS, RetrievalGate, RetrievalState, initialize_store


class TestInitializeStore:
    def test_seeds_empty_store(self, store, embeddings):
        assert initialize_store(store) is True
        assert [d.text for d in store.documents] == list(SEED_CORPUS)
        assert embeddings.calls == [("embed_texts", list(SEED_CORPUS))]

    def test_skips_populated_store(self, store, embeddings):
        store.add_document("already here")
        calls = embeddings.call_count

        assert initialize_store(store) is False
        assert len(store) == 1
        assert embeddings.call_count == calls

    def test_runs_once_across_calls(self, store):
        initialize_store(store)
        initialize_store(store)
        assert len(store) == len(SEED_CORPUS)

    def test_custom_corpus(self, store):
        initialize_store(store, ["only one"])
        assert [d.text for d in store.documents] == ["only one"]

    def test_provider_failure_is_initialization_unavailable(self, store, embeddings):
        embeddings.fail_with = ProviderError("OPENAI_API_KEY is not set")
        with pytest.raises(InitializationUnavailable):
            initialize_store(store)
        assert len(store) == 0
        assert not store.storage.exists()


class TestRetrievalGate:
    def test_starts_uninitialized(self, store, embeddings):
        gate = RetrievalGate(store)
        assert gate.state is RetrievalState.UNINITIALIZED
        assert embeddings.call_count == 0

    def test_available_after_seeding(self, store):
        gate = RetrievalGate(store)
        assert gate.ensure_initialized() is RetrievalState.AVAILABLE
        assert len(store) == len(SEED_CORPUS)

    def test_retrieve_initializes_lazily(self, store):
        gate = RetrievalGate(store)
        results = gate.retrieve("vector embeddings", 2)
        assert gate.state is RetrievalState.AVAILABLE
        assert len(results) == 2

    def test_unavailable_is_permanent(self, store, embeddings):
        embeddings.fail_with = ProviderError("no credentials")
        gate = RetrievalGate(store)

        assert gate.ensure_initialized() is RetrievalState.UNAVAILABLE
        calls = embeddings.call_count

        embeddings.fail_with = None
        assert gate.retrieve("anything") == []
        assert gate.ensure_initialized() is RetrievalState.UNAVAILABLE
        assert embeddings.call_count == calls
        assert len(store) == 0

    def test_persistence_failure_disables_retrieval(self, store):
        def broken_initializer(s):
            raise PersistenceError("read-only disk")

        gate = RetrievalGate(store, initializer=broken_initializer)
        assert gate.ensure_initialized() is RetrievalState.UNAVAILABLE

    def test_rejected_seed_embedding_disables_retrieval(self, store, embeddings):
        embeddings.default = [float("nan"), 0.0, 0.0]
        gate = RetrievalGate(store)

        for _ in range(3):
            assert gate.retrieve("anything") == []
        assert gate.state is RetrievalState.UNAVAILABLE
        assert embeddings.call_count == 1
        assert len(store) == 0

    def test_initializer_called_once(self, store):
        calls = []

        def counting_initializer(s):
            calls.append(s)
            return False

        gate = RetrievalGate(store, initializer=counting_initializer)
        gate.retrieve("a")
        gate.retrieve("b")
        gate.ensure_initialized()
        assert calls == [store]

    def test_retrieve_with_scores(self, store):
        gate = RetrievalGate(store)
        hits = gate.retrieve_with_scores("anything", 3)
        assert len(hits) == 3
        assert all(isinstance(score, float) for _, score in hits)
