"""
Name: ASGI Application

Responsibilities:
  - Build the FastAPI app and its OpenAPI tags
  - Install request-context and CORS middleware
  - Mount chat, RAG and Storm endpoints under /api/v1
  - Expose a health check

Collaborators:
  - FastAPI: ASGI web framework
  - RequestContextMiddleware: Request ID and logging context
  - routes.router: endpoints
  - container: vector store for the health check

Constraints:
  - CORS origins come from ALLOWED_ORIGINS (comma-separated)
  - No authentication or rate limiting

Notes:
  - Run with: uvicorn rag_tutorial.main:app
  - CORS is added last, so it wraps RequestContextMiddleware
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .container import get_storm_service, get_vector_store
from .exception_handlers import register_exception_handlers
from .logger import logger
from .middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from .routes import router

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Applies log level and logs configuration."""
    settings = get_settings()
    logger.setLevel(settings.log_level)

    logger.info(
        "RAG Tutorial API starting up",
        extra={
            "app_env": settings.app_env,
            "chat_model": settings.chat_model,
            "embedding_model": settings.embedding_model,
            "chunk_size_tokens": settings.chunk_size_tokens,
            "fake_llm": settings.fake_llm,
            "fake_embeddings": settings.fake_embeddings,
            "storm_enabled": settings.storm_enabled,
        },
    )
    yield

    storm = get_storm_service()
    if storm is not None:
        storm.close()
    logger.info("RAG Tutorial API shutting down")


_settings = get_settings()

app = FastAPI(
    title="RAG Tutorial API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "chat", "description": "Plain chat completion"},
        {"name": "rag", "description": "Document upload, similarity search and RAG answers"},
        {"name": "storm", "description": "Storm document Q&A API"},
    ],
)

app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.get_allowed_origins_list(),
    allow_credentials=_settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", REQUEST_ID_HEADER],
)

app.include_router(router, prefix=API_PREFIX)

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """
    R: Liveness plus store size.

    Returns:
        ok: Always True once the app is serving
        chunks: Number of chunks in the vector store
        fake_llm / fake_embeddings: Whether deterministic providers are active
        request_id: Correlation ID for this request
    """
    settings = get_settings()
    return {
        "ok": True,
        "chunks": get_vector_store().count(),
        "fake_llm": settings.fake_llm,
        "fake_embeddings": settings.fake_embeddings,
        "request_id": getattr(request.state, "request_id", None),
    }
