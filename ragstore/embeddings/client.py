"""
OpenAI embeddings client.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from openai import OpenAI, OpenAIError

from ragstore.config import settings
from ragstore.errors import ProviderError

DEFAULT_EMBEDDING_MODEL = settings.embedding_model_name
DEFAULT_EMBED_BATCH_SIZE = settings.embed_batch_size

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    def embed_text(self, text: str) -> List[float]:
        ...

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        ...


class EmbeddingsClient:
    def __init__(
        self,
        model: str = DEFAULT_EMBEDDING_MODEL,
        batch_size: int = DEFAULT_EMBED_BATCH_SIZE,
        client: OpenAI | None = None,
        api_key: str | None = None,
    ) -> None:
        self.model = model
        self.batch_size = batch_size
        if api_key is None and settings.openai_api_key:
            api_key = settings.openai_api_key.get_secret_value()
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> OpenAI:
        # Built on first use so a store can be opened and read without credentials.
        if self._client is None:
            if not self._api_key:
                raise ProviderError("OPENAI_API_KEY is not set")
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []

        embeddings: List[List[float]] = []
        for i in range(0, len(texts), self.batch_size):
            batch = list(texts[i : i + self.batch_size])
            try:
                response = self.client.embeddings.create(model=self.model, input=batch)
            except OpenAIError as exc:
                logger.warning(
                    "Embedding request failed",
                    extra={"model": self.model, "batch": len(batch), "error": str(exc)},
                )
                raise ProviderError(f"Embedding request failed: {exc}") from exc
            ordered = sorted(response.data, key=lambda item: item.index)
            embeddings.extend([list(item.embedding) for item in ordered])
        return embeddings

    def embed_text(self, text: str) -> List[float]:
        vectors = self.embed_texts([text])
        if not vectors:
            raise ProviderError("Embedding provider returned no vector")
        return vectors[0]


__all__ = ["EmbeddingProvider", "EmbeddingsClient", "DEFAULT_EMBEDDING_MODEL"]
