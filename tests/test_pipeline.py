"""Tests for the retrieval caller."""

from ragstore.errors import ProviderError
from ragstore.rag.bootstrap import RetrievalGate, RetrievalState
from ragstore.rag.pipeline import ContextService, build_system_prompt, extract_user_query


class TestExtractUserQuery:
    def test_string_content(self):
        messages = [{"role": "user", "content": "first"}, {"role": "user", "content": "second"}]
        assert extract_user_query(messages) == "second"

    def test_first_text_part(self):
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "image", "image": "data:..."},
                    {"type": "text", "text": "what is this?"},
                    {"type": "text", "text": "ignored"},
                ],
            }
        ]
        assert extract_user_query(messages) == "what is this?"

    def test_no_text(self):
        assert extract_user_query([]) == ""
        assert extract_user_query([{"role": "user", "content": [{"type": "image"}]}]) == ""
        assert extract_user_query([{"role": "user"}]) == ""


class TestBuildSystemPrompt:
    def test_with_context(self):
        prompt = build_system_prompt("cats are mammals")
        assert "knowledge base through RAG" in prompt
        assert "cats are mammals" in prompt
        assert "web_search" in prompt

    def test_without_context(self):
        prompt = build_system_prompt("")
        assert "knowledge base" not in prompt
        assert prompt.startswith("You are a helpful AI assistant.")


class TestContextService:
    def test_builds_context_from_store(self, store):
        store.add_documents(["alpha", "beta"])
        service = ContextService(RetrievalGate(store), top_k=3)

        result = service.build_context([{"role": "user", "content": "  question  "}])

        assert result.query == "question"
        assert [d.text for d in result.documents] == ["alpha", "beta"]
        assert result.context == "alpha\n\nbeta"
        assert "alpha\n\nbeta" in result.system_prompt

    def test_empty_query_skips_retrieval(self, store, embeddings):
        gate = RetrievalGate(store)
        result = ContextService(gate).build_context([{"role": "user", "content": "   "}])
        assert result.documents == []
        assert gate.state is RetrievalState.UNINITIALIZED
        assert embeddings.call_count == 0

    def test_retrieval_disabled_gives_plain_prompt(self, store, embeddings):
        embeddings.fail_with = ProviderError("no key")
        result = ContextService(RetrievalGate(store)).build_context([{"role": "user", "content": "hi"}])
        assert result.documents == []
        assert result.system_prompt == build_system_prompt("")

    def test_search_failure_gives_plain_prompt(self, store, embeddings):
        store.add_document("alpha")
        gate = RetrievalGate(store)
        gate.ensure_initialized()
        embeddings.fail_with = ProviderError("timeout")

        result = ContextService(gate).build_context([{"role": "user", "content": "hi"}])
        assert result.context == ""
