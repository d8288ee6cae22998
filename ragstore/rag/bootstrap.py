"""
Seed corpus and one-time retrieval bootstrap.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, List, Sequence, Tuple

from ragstore.errors import InitializationUnavailable, ProviderError, RagStoreError
from ragstore.vector_store.base import Document, DocumentStore

logger = logging.getLogger(__name__)

SEED_CORPUS: tuple[str, ...] = (
    "The chatbot supports multimodal inputs including text and images. "
    "Users can upload images to ask questions about them.",
    "RAG (Retrieval-Augmented Generation) enhances responses by retrieving relevant context "
    "from a knowledge base before generating answers.",
    "Tool-calling allows the chatbot to perform actions like web searches, fetching data, "
    "or generating UI elements dynamically.",
    "The chatbot uses Groq API for fast inference and supports streaming responses for real-time interaction.",
    "Vector embeddings are used to find semantically similar documents in the knowledge base for context retrieval.",
    "The system supports both synchronous and streaming responses, providing flexibility for different use cases.",
)


def initialize_store(store: DocumentStore, seed_corpus: Sequence[str] = SEED_CORPUS) -> bool:
    """
    Seed an empty store with the bootstrap corpus.

    Returns True when the corpus was added and False when the store already
    held documents. Check-then-act is not atomic; run it once per process.

    Raises:
        InitializationUnavailable: the embedding provider could not be used
    """
    if len(store) > 0:
        logger.info("Store already populated, skipping seed", extra={"count": len(store)})
        return False

    try:
        store.add_documents(list(seed_corpus))
    except ProviderError as exc:
        raise InitializationUnavailable(f"Failed to initialize RAG: {exc}") from exc

    logger.info("Seeded document store", extra={"count": len(seed_corpus)})
    return True


class RetrievalState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class RetrievalGate:
    """
    One-time bootstrap decision in front of a store.

    The first call to ``ensure_initialized`` runs the initializer. If that
    raises any RagStoreError, retrieval stays disabled for the life of the
    gate and is never retried.
    """

    def __init__(
        self,
        store: DocumentStore,
        initializer: Callable[[DocumentStore], bool] = initialize_store,
    ) -> None:
        self.store = store
        self._initializer = initializer
        self._state = RetrievalState.UNINITIALIZED

    @property
    def state(self) -> RetrievalState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self.ensure_initialized() is RetrievalState.AVAILABLE

    def ensure_initialized(self) -> RetrievalState:
        if self._state is not RetrievalState.UNINITIALIZED:
            return self._state

        try:
            self._initializer(self.store)
        except RagStoreError as exc:
            logger.warning(
                "RAG initialization failed (will continue without RAG)",
                extra={"error": str(exc)},
            )
            self._state = RetrievalState.UNAVAILABLE
        else:
            self._state = RetrievalState.AVAILABLE
        return self._state

    def retrieve(self, query: str, k: int = 4) -> List[Document]:
        if not self.enabled:
            return []
        return self.store.similarity_search(query, k)

    def retrieve_with_scores(self, query: str, k: int = 4) -> List[Tuple[Document, float]]:
        if not self.enabled:
            return []
        return self.store.similarity_search_with_scores(query, k)


__all__ = ["SEED_CORPUS", "initialize_store", "RetrievalGate", "RetrievalState"]
