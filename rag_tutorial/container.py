"""
Name: Composition Root

Responsibilities:
  - Build the process-wide store, providers, chunker, extractor and Storm client
  - Hand FastAPI fresh use cases that share those singletons
  - Pick fake or Gemini providers from FAKE_LLM / FAKE_EMBEDDINGS

Collaborators:
  - config.get_settings: every knob comes from Settings
  - routes.py: resolves use cases through Depends()

Notes:
  - Singletons are lru_cache'd functions; tests replace them through
    app.dependency_overrides or cache_clear()
  - Storm factories return None when STORM_API_KEY is unset
"""

from functools import lru_cache
from typing import Optional

from .application.use_cases import (
    AnswerQueryUseCase,
    ChatUseCase,
    IngestDocumentUseCase,
    SearchChunksUseCase,
    StormQueryUseCase,
    StormUploadUseCase,
    UploadDocumentUseCase,
)
from .config import get_settings
from .domain.repositories import VectorStore
from .domain.services import (
    CompletionService,
    DocumentTextExtractor,
    EmbeddingService,
    StormService,
    TextChunkerService,
)
from .infrastructure.parsers import SimpleDocumentTextExtractor
from .infrastructure.prompts import get_prompt_loader
from .infrastructure.repositories import InMemoryVectorStore
from .infrastructure.services import (
    FakeCompletionService,
    FakeEmbeddingService,
    GoogleCompletionService,
    GoogleEmbeddingService,
    StormClient,
)
from .infrastructure.text import TokenTextChunker


@lru_cache
def get_vector_store() -> VectorStore:
    """R: Process-wide vector store."""
    return InMemoryVectorStore()


@lru_cache
def get_embedding_service() -> EmbeddingService:
    """
    R: Get singleton instance of embedding service.

    Returns:
        Google or Fake implementation of EmbeddingService
    """
    settings = get_settings()
    if settings.fake_embeddings:
        return FakeEmbeddingService()
    return GoogleEmbeddingService(
        api_key=settings.google_api_key,
        model_id=settings.embedding_model,
    )


@lru_cache
def get_completion_service() -> CompletionService:
    """
    R: Get singleton instance of completion service.

    Returns:
        Google or Fake implementation of CompletionService
    """
    settings = get_settings()
    if settings.fake_llm:
        return FakeCompletionService()
    return GoogleCompletionService(
        api_key=settings.google_api_key,
        default_model=settings.chat_model,
    )


@lru_cache
def get_text_chunker() -> TextChunkerService:
    """R: Token chunker configured from Settings."""
    settings = get_settings()
    return TokenTextChunker(
        chunk_size_tokens=settings.chunk_size_tokens,
        min_chunk_size_chars=settings.min_chunk_size_chars,
        min_chunk_length_to_embed=settings.min_chunk_length_to_embed,
        max_num_chunks=settings.max_num_chunks,
        keep_separator=settings.keep_separator,
        encoding_name=settings.tokenizer_encoding,
    )


@lru_cache
def get_document_text_extractor() -> DocumentTextExtractor:
    return SimpleDocumentTextExtractor()


@lru_cache
def get_storm_service() -> Optional[StormService]:
    """
    R: Storm client, or None when STORM_API_KEY is not set.
    """
    settings = get_settings()
    if not settings.storm_enabled:
        return None
    return StormClient(
        api_key=settings.storm_api_key,
        base_url=settings.storm_base_url,
        timeout_seconds=settings.storm_timeout_seconds,
    )


# R: Use case factories (new instance per request, shared singletons inside)
def get_ingest_document_use_case() -> IngestDocumentUseCase:
    return IngestDocumentUseCase(
        store=get_vector_store(),
        embedding_service=get_embedding_service(),
        chunker=get_text_chunker(),
    )


def get_upload_document_use_case() -> UploadDocumentUseCase:
    return UploadDocumentUseCase(
        extractor=get_document_text_extractor(),
        ingest_use_case=get_ingest_document_use_case(),
    )


def get_search_chunks_use_case() -> SearchChunksUseCase:
    return SearchChunksUseCase(
        store=get_vector_store(),
        embedding_service=get_embedding_service(),
    )


def get_answer_query_use_case() -> AnswerQueryUseCase:
    return AnswerQueryUseCase(
        store=get_vector_store(),
        embedding_service=get_embedding_service(),
        completion_service=get_completion_service(),
        prompt_loader=get_prompt_loader(),
        default_model=get_settings().chat_model,
    )


def get_chat_use_case() -> ChatUseCase:
    return ChatUseCase(
        completion_service=get_completion_service(),
        default_model=get_settings().chat_model,
    )


def get_storm_upload_use_case() -> Optional[StormUploadUseCase]:
    storm = get_storm_service()
    if storm is None:
        return None
    return StormUploadUseCase(storm, get_settings().storm_default_bucket_id)


def get_storm_query_use_case() -> Optional[StormQueryUseCase]:
    storm = get_storm_service()
    if storm is None:
        return None
    return StormQueryUseCase(storm, get_settings().storm_default_bucket_id)
