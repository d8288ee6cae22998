"""
Retrieval caller: pull the user query from a chat transcript, fetch context
from the document store and fold it into the assistant system prompt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence

from ragstore.config import settings
from ragstore.errors import RagStoreError
from ragstore.rag.bootstrap import RetrievalGate
from ragstore.vector_store.base import Document

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_TOP_K = settings.context_top_k

TOOLS_SECTION = """Available tools:
- web_search: Search the web for current information
- get_current_date: Get the current date and time
- calculate: Perform mathematical calculations

Use tools when appropriate to provide the most helpful responses."""


@dataclass
class RetrievalContext:
    query: str
    documents: List[Document] = field(default_factory=list)
    context: str = ""
    system_prompt: str = ""


def extract_user_query(messages: Sequence[Mapping[str, Any]]) -> str:
    """Text of the last message: a plain string or the first ``text`` part."""
    if not messages:
        return ""

    content = messages[-1].get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for part in content:
            if isinstance(part, Mapping) and part.get("type") == "text":
                text = part.get("text")
                return text if isinstance(text, str) else ""
    return ""


def build_system_prompt(context: str) -> str:
    if context:
        return (
            "You are a helpful AI assistant. You have access to a knowledge base through "
            "RAG (Retrieval-Augmented Generation).\n\n"
            f"Here is relevant context from the knowledge base:\n{context}\n\n"
            "Use this context to provide accurate and helpful responses. If the context doesn't "
            "contain relevant information, you can use your general knowledge or available tools.\n\n"
            "You can process both text and images. When images are provided, describe what you see "
            "and answer questions about them.\n\n"
            f"{TOOLS_SECTION}"
        )
    return (
        "You are a helpful AI assistant.\n\n"
        "Use your general knowledge and available tools to provide accurate and helpful responses.\n\n"
        "You can process both text and images. When images are provided, describe what you see "
        "and answer questions about them.\n\n"
        f"{TOOLS_SECTION}"
    )


class ContextService:
    """Builds the per-turn retrieval context for the chat model."""

    def __init__(
        self,
        gate: RetrievalGate,
        top_k: int = DEFAULT_CONTEXT_TOP_K,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.gate = gate
        self.top_k = top_k
        self.logger = logger_ or logging.getLogger(__name__)

    def build_context(self, messages: Sequence[Mapping[str, Any]]) -> RetrievalContext:
        query = extract_user_query(messages).strip()
        documents: List[Document] = []

        if query:
            try:
                documents = self.gate.retrieve(query, self.top_k)
            except RagStoreError as exc:
                # A missing context must never abort the chat turn.
                self.logger.warning("RAG search failed (continuing without context)", extra={"error": str(exc)})
                documents = []

        context = "\n\n".join(doc.text for doc in documents)
        self.logger.info(
            "Built retrieval context",
            extra={"query_len": len(query), "documents": len(documents), "retrieval": self.gate.state.value},
        )
        return RetrievalContext(
            query=query,
            documents=documents,
            context=context,
            system_prompt=build_system_prompt(context),
        )


__all__ = ["ContextService", "RetrievalContext", "build_system_prompt", "extract_user_query"]
