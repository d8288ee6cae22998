import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ragstore.api.routes import router as api_router
from ragstore.config import public_settings, settings, setup_logging
from ragstore.rag.bootstrap import RetrievalGate
from ragstore.vector_store import JsonVectorStore, get_vector_store

logger = setup_logging()


def create_app(vector_store: JsonVectorStore | None = None, retrieval_gate: RetrievalGate | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A malformed snapshot raises here and aborts startup.
        store = vector_store if vector_store is not None else get_vector_store()
        app.state.vector_store = store
        app.state.retrieval_gate = retrieval_gate if retrieval_gate is not None else RetrievalGate(store)
        logger.info("Document store ready", extra={"count": len(store)})
        yield

    app = FastAPI(title="RAG Document Store", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(api_router)
    return app


logger.info("Application starting")
logger.info("Loaded settings: %s", public_settings())

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.app_host, port=settings.app_port)
