from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


# Admin
class AddDocumentsRequest(BaseModel):
    """Append documents to the knowledge base."""

    texts: List[str] = Field(..., min_length=1, description="Document texts, embedded in one batch")
    metadatas: List[Dict[str, Any] | None] | None = Field(
        default=None,
        description="Optional metadata per text, paired by position",
    )


class AddDocumentsResponse(BaseModel):
    status: Literal["completed"] = Field(default="completed")
    added: int = Field(..., ge=0, description="Number of documents added")
    total: int = Field(..., ge=0, description="Documents in the store after the write")


class ClearResponse(BaseModel):
    status: Literal["cleared"] = Field(default="cleared")


# Retrieval
class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Search text")
    k: int | None = Field(default=None, description="Maximum number of documents to return")


class ScoredDocument(BaseModel):
    id: str
    text: str
    metadata: Dict[str, Any] | None = None
    score: float


class SearchResponse(BaseModel):
    query: str
    results: List[ScoredDocument]


class ChatMessage(BaseModel):
    role: str
    content: str | List[Dict[str, Any]]


class ContextRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class ContextDocument(BaseModel):
    id: str
    text: str
    metadata: Dict[str, Any] | None = None


class ContextResponse(BaseModel):
    query: str
    system_prompt: str
    documents: List[ContextDocument]


class StoreStatus(BaseModel):
    documents: int = Field(..., ge=0)
    dimension: int | None = None
    retrieval: Literal["uninitialized", "available", "unavailable"]


__all__ = [
    "AddDocumentsRequest",
    "AddDocumentsResponse",
    "ClearResponse",
    "SearchRequest",
    "ScoredDocument",
    "SearchResponse",
    "ChatMessage",
    "ContextRequest",
    "ContextDocument",
    "ContextResponse",
    "StoreStatus",
]
