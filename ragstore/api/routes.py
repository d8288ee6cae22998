from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Request, status

from ragstore.config import settings
from ragstore.errors import PersistenceError, ProviderError, ValidationError
from ragstore.models.schemas import (
    AddDocumentsRequest,
    AddDocumentsResponse,
    ClearResponse,
    ContextDocument,
    ContextRequest,
    ContextResponse,
    ScoredDocument,
    SearchRequest,
    SearchResponse,
    StoreStatus,
)
from ragstore.rag.bootstrap import RetrievalGate
from ragstore.rag.pipeline import ContextService
from ragstore.vector_store.json_store import JsonVectorStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_admin_token(x_admin_token: str | None) -> None:
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin token is not configured",
        )
    if x_admin_token != settings.admin_token.get_secret_value():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def _store(request: Request) -> JsonVectorStore:
    return request.app.state.vector_store


def _gate(request: Request) -> RetrievalGate:
    return request.app.state.retrieval_gate


@router.post("/admin/documents", response_model=AddDocumentsResponse, summary="Add documents")
def admin_add_documents(
    payload: AddDocumentsRequest,
    request: Request,
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
) -> AddDocumentsResponse:
    _check_admin_token(x_admin_token)
    store = _store(request)

    logger.info("Admin add documents requested", extra={"count": len(payload.texts)})
    try:
        store.add_documents(payload.texts, payload.metadatas)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ProviderError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.error("Document write is not durable", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Change is not durable: {exc}",
        ) from exc

    return AddDocumentsResponse(status="completed", added=len(payload.texts), total=len(store))


@router.post("/admin/clear", response_model=ClearResponse, summary="Remove every document")
def admin_clear(
    request: Request,
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
) -> ClearResponse:
    _check_admin_token(x_admin_token)
    try:
        _store(request).clear()
    except PersistenceError as exc:
        logger.error("Clear is not durable", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Change is not durable: {exc}",
        ) from exc
    logger.info("Admin clear completed")
    return ClearResponse()


@router.get("/api/v1/status", response_model=StoreStatus, summary="Store and retrieval status")
def store_status(request: Request) -> StoreStatus:
    store = _store(request)
    return StoreStatus(
        documents=len(store),
        dimension=store.dimension,
        retrieval=_gate(request).state.value,
    )


@router.post("/api/v1/search", response_model=SearchResponse, summary="Similarity search")
def search(payload: SearchRequest, request: Request) -> SearchResponse:
    query = payload.query.strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query must not be empty")

    k = payload.k if payload.k is not None else settings.default_top_k
    hits = _gate(request).retrieve_with_scores(query, k)
    return SearchResponse(
        query=query,
        results=[
            ScoredDocument(id=doc.id, text=doc.text, metadata=doc.metadata, score=score)
            for doc, score in hits
        ],
    )


@router.post("/api/v1/context", response_model=ContextResponse, summary="Build retrieval context for a chat turn")
def build_context(payload: ContextRequest, request: Request) -> ContextResponse:
    service = ContextService(_gate(request))
    result = service.build_context([message.model_dump() for message in payload.messages])
    return ContextResponse(
        query=result.query,
        system_prompt=result.system_prompt,
        documents=[ContextDocument(id=doc.id, text=doc.text, metadata=doc.metadata) for doc in result.documents],
    )


__all__ = ["router"]
