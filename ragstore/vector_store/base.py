"""
Document store interface and shared types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple


@dataclass(frozen=True)
class Document:
    id: str
    text: str
    embedding: Tuple[float, ...]
    metadata: Optional[Dict[str, Any]] = None

    @property
    def dimension(self) -> int:
        return len(self.embedding)


class DocumentStore(Protocol):
    @property
    def documents(self) -> Tuple[Document, ...]:
        ...

    def __len__(self) -> int:
        ...

    def clear(self) -> None:
        ...

    def add_document(self, text: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        ...

    def add_documents(
        self,
        texts: Sequence[str],
        metadatas: Optional[Sequence[Optional[Dict[str, Any]]]] = None,
    ) -> None:
        ...

    def similarity_search(self, query: str, k: int = 4) -> List[Document]:
        ...

    def similarity_search_with_scores(self, query: str, k: int = 4) -> List[Tuple[Document, float]]:
        ...


__all__ = ["Document", "DocumentStore"]
