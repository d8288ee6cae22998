"""
File-backed DocumentStore implementation.

Documents live in memory as an insertion-ordered list and are persisted as a
whole JSON snapshot after every mutation. Searching is a linear cosine scan
(see ``ragstore.vector_store.similarity``).

The store takes no locks. Mutations replace the in-memory list instead of
editing it, so a concurrent search always scores a consistent snapshot, but
two concurrent writers can still lose one another's update on disk. Callers
that write from several threads must serialise writes themselves.
"""

from __future__ import annotations

import copy
import dataclasses
import json
import logging
import math
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ragstore.config import settings
from ragstore.embeddings.client import EmbeddingProvider
from ragstore.errors import ProviderError, ValidationError
from ragstore.vector_store.base import Document, DocumentStore
from ragstore.vector_store.persistence import JsonFileStorage
from ragstore.vector_store.similarity import rank_documents

DEFAULT_PERSIST_DIR = settings.vector_store_path
DEFAULT_STORE_ID = settings.vector_store_id
DEFAULT_TOP_K = 4

logger = logging.getLogger(__name__)

MetadataInput = Optional[Dict[str, Any]]


def _detached(doc: Document) -> Document:
    if doc.metadata is None:
        return doc
    return dataclasses.replace(doc, metadata=copy.deepcopy(doc.metadata))


def _validate_texts(texts: Sequence[str]) -> List[str]:
    if isinstance(texts, str) or not isinstance(texts, Sequence):
        raise ValidationError("texts must be a sequence of strings")
    if not texts:
        raise ValidationError("texts must not be empty")
    for position, text in enumerate(texts):
        if not isinstance(text, str):
            raise ValidationError(f"Text at position {position} is not a string")
        if not text.strip():
            raise ValidationError(f"Text at position {position} is empty")
    return list(texts)


def _validate_metadatas(metadatas: Optional[Sequence[MetadataInput]], count: int) -> List[MetadataInput]:
    if metadatas is None:
        return [None] * count
    if len(metadatas) != count:
        raise ValidationError(f"Got {len(metadatas)} metadata entries for {count} texts")

    cleaned: List[MetadataInput] = []
    for position, meta in enumerate(metadatas):
        if meta is None:
            cleaned.append(None)
            continue
        if not isinstance(meta, dict):
            raise ValidationError(f"Metadata at position {position} is not a mapping")
        if not all(isinstance(key, str) for key in meta):
            raise ValidationError(f"Metadata at position {position} has non-string keys")
        try:
            encoded = json.dumps(meta, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Metadata at position {position} is not JSON-serialisable: {exc}") from exc
        # Keep the JSON form in memory so it equals what a reload produces.
        cleaned.append(json.loads(encoded))
    return cleaned


class JsonVectorStore(DocumentStore):
    def __init__(
        self,
        embeddings_client: EmbeddingProvider,
        persist_directory: str | None = None,
        store_id: str = DEFAULT_STORE_ID,
        storage: JsonFileStorage | None = None,
    ) -> None:
        self.embeddings_client = embeddings_client
        self.storage = storage or JsonFileStorage(persist_directory or DEFAULT_PERSIST_DIR, store_id)
        self._documents: List[Document] = self.storage.load()
        logger.info(
            "JsonVectorStore initialised",
            extra={"path": str(self.storage.path), "count": len(self._documents)},
        )

    # --- Read access ---
    @property
    def documents(self) -> Tuple[Document, ...]:
        return tuple(_detached(doc) for doc in self._documents)

    @property
    def dimension(self) -> int | None:
        docs = self._documents
        return docs[0].dimension if docs else None

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, document_id: str) -> Document | None:
        for doc in self._documents:
            if doc.id == document_id:
                return _detached(doc)
        return None

    # --- Mutations ---
    def add_document(self, text: str, metadata: MetadataInput = None) -> None:
        self.add_documents([text], None if metadata is None else [metadata])

    def add_documents(
        self,
        texts: Sequence[str],
        metadatas: Optional[Sequence[MetadataInput]] = None,
    ) -> None:
        """
        Embed ``texts`` with one provider call and append them in input order.

        The new snapshot is written before it replaces the in-memory list, so
        a failed write leaves both disk and memory unchanged.

        Raises:
            ValidationError: bad input or inconsistent embedding dimensions
            ProviderError: the embedding call failed
            PersistenceError: the snapshot could not be written
        """
        texts = _validate_texts(texts)
        cleaned_metadatas = _validate_metadatas(metadatas, len(texts))

        embeddings = self.embeddings_client.embed_texts(texts)
        vectors = self._validate_embeddings(embeddings, len(texts))

        current = self._documents
        taken = {doc.id for doc in current}
        new_docs: List[Document] = []
        for text, vector, meta in zip(texts, vectors, cleaned_metadatas):
            doc_id = self._new_id(taken)
            taken.add(doc_id)
            new_docs.append(Document(id=doc_id, text=text, embedding=vector, metadata=meta))

        snapshot = current + new_docs
        self.storage.save(snapshot)
        self._documents = snapshot
        logger.info("Added documents", extra={"count": len(new_docs), "total": len(snapshot)})

    def clear(self) -> None:
        self.storage.save([])
        self._documents = []
        logger.info("Document store cleared", extra={"path": str(self.storage.path)})

    # --- Search ---
    def similarity_search(self, query: str, k: int = DEFAULT_TOP_K) -> List[Document]:
        return [doc for doc, _ in self.similarity_search_with_scores(query, k)]

    def similarity_search_with_scores(self, query: str, k: int = DEFAULT_TOP_K) -> List[Tuple[Document, float]]:
        """
        Best-effort top-k search. Provider failures degrade to an empty result.
        """
        documents = self._documents
        if not documents or k <= 0:
            return []

        try:
            query_embedding = self.embeddings_client.embed_text(query)
        except ProviderError as exc:
            logger.warning("Embedding query failed, returning no documents", extra={"error": str(exc)})
            return []

        dimension = documents[0].dimension
        if len(query_embedding) != dimension:
            logger.warning(
                "Query embedding dimension mismatch, returning no documents",
                extra={"expected": dimension, "got": len(query_embedding)},
            )
            return []
        if not all(math.isfinite(x) for x in query_embedding):
            logger.warning("Query embedding has non-finite values, returning no documents")
            return []

        results = [(_detached(doc), score) for doc, score in rank_documents(query_embedding, documents, k)]
        logger.info(
            "Similarity search",
            extra={
                "requested": k,
                "returned": len(results),
                "top_score": round(results[0][1], 3) if results else None,
            },
        )
        return results

    # --- Helpers ---
    def _validate_embeddings(self, embeddings: Sequence[Sequence[float]], expected: int) -> List[Tuple[float, ...]]:
        if len(embeddings) != expected:
            raise ProviderError(f"Embedding provider returned {len(embeddings)} vectors for {expected} texts")

        dimension = self.dimension
        vectors: List[Tuple[float, ...]] = []
        for position, raw in enumerate(embeddings):
            vector = tuple(float(x) for x in raw)
            if not vector:
                raise ValidationError(f"Embedding at position {position} is empty")
            if not all(math.isfinite(x) for x in vector):
                raise ValidationError(f"Embedding at position {position} contains non-finite values")
            if dimension is None:
                dimension = len(vector)
            elif len(vector) != dimension:
                raise ValidationError(
                    f"Embedding at position {position} has dimension {len(vector)}, store uses {dimension}"
                )
            vectors.append(vector)
        return vectors

    @staticmethod
    def _new_id(taken: set[str]) -> str:
        while True:
            doc_id = uuid.uuid4().hex
            if doc_id not in taken:
                return doc_id


__all__ = ["JsonVectorStore", "DEFAULT_PERSIST_DIR", "DEFAULT_STORE_ID", "DEFAULT_TOP_K"]
