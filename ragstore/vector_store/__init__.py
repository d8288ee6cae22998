"""
Document store abstractions and factories.
"""

from ragstore.embeddings.client import EmbeddingProvider, EmbeddingsClient
from ragstore.vector_store.json_store import DEFAULT_PERSIST_DIR, DEFAULT_STORE_ID, JsonVectorStore


def get_vector_store(
    embeddings_client: EmbeddingProvider | None = None,
    persist_directory: str | None = None,
    store_id: str = DEFAULT_STORE_ID,
) -> JsonVectorStore:
    """
    Build a JsonVectorStore from settings.

    Each call loads a fresh instance from disk; the application keeps the one
    it builds at startup and hands it to callers explicitly.
    """
    return JsonVectorStore(
        embeddings_client if embeddings_client is not None else EmbeddingsClient(),
        persist_directory=persist_directory or DEFAULT_PERSIST_DIR,
        store_id=store_id,
    )


__all__ = ["DEFAULT_PERSIST_DIR", "DEFAULT_STORE_ID", "get_vector_store", "JsonVectorStore"]
