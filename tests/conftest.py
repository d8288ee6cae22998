"""
Shared fixtures: a deterministic embedding provider and isolated stores.
"""

from typing import Dict, List, Sequence

import pytest

from ragstore.vector_store.json_store import JsonVectorStore
from ragstore.vector_store.persistence import JsonFileStorage


class FakeEmbeddings:
    """Looks vectors up in a table; unknown texts get a default vector."""

    def __init__(self, vectors: Dict[str, List[float]] | None = None, default: List[float] | None = None):
        self.vectors = dict(vectors or {})
        self.default = default or [1.0, 1.0, 1.0]
        self.calls: List[tuple] = []
        self.fail_with: Exception | None = None

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def embed_text(self, text: str) -> List[float]:
        self.calls.append(("embed_text", text))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.vectors.get(text, self.default))

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls.append(("embed_texts", list(texts)))
        if self.fail_with is not None:
            raise self.fail_with
        return [list(self.vectors.get(t, self.default)) for t in texts]


@pytest.fixture
def embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def store_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def storage(store_dir) -> JsonFileStorage:
    return JsonFileStorage(store_dir, "vectorstore")


@pytest.fixture
def store(embeddings, store_dir) -> JsonVectorStore:
    return JsonVectorStore(embeddings, persist_directory=str(store_dir), store_id="vectorstore")
