"""
Name: Gemini Embedding Adapter

Responsibilities:
  - Embed chunk texts (retrieval_document) and queries (retrieval_query)
  - Split large inputs into API-sized requests, preserving order
  - Retry transient SDK failures

Collaborators:
  - google.genai: models.embed_content
  - retry.create_retry_decorator: tenacity policy

Constraints:
  - At most BATCH_LIMIT texts per request
  - Any SDK or response-shape failure is an EmbeddingError; SDK exceptions
    are kept as original_error
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from google import genai

from ...domain.services import EmbeddingService
from ...exceptions import EmbeddingError
from ...logger import logger
from .retry import create_retry_decorator

TASK_DOCUMENT = "retrieval_document"
TASK_QUERY = "retrieval_query"


def _vectors_from_response(response: Any, expected: int) -> list[list[float]]:
    """R: Pull float vectors out of an EmbedContentResponse, checking its shape."""
    embeddings = list(getattr(response, "embeddings", None) or [])
    if len(embeddings) != expected:
        raise EmbeddingError(
            f"Embedding count mismatch: sent {expected} texts, got {len(embeddings)} vectors"
        )

    vectors = [list(getattr(e, "values", None) or []) for e in embeddings]
    empty = [i for i, vector in enumerate(vectors) if not vector]
    if empty:
        raise EmbeddingError(f"Provider returned empty vectors at positions {empty}")
    return [[float(v) for v in vector] for vector in vectors]


class GoogleEmbeddingService(EmbeddingService):
    """R: EmbeddingService backed by Gemini text-embedding-004."""

    MODEL_ID = "text-embedding-004"
    BATCH_LIMIT = 10

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        batch_limit: int | None = None,
        retry_decorator: Callable | None = None,
    ):
        """
        Args:
            api_key: Google API key (required unless client is given)
            client: Pre-built genai.Client, mainly for tests
            model_id: Embedding model (default: text-embedding-004)
            batch_limit: Texts per request (default: 10)
            retry_decorator: Replaces the Settings-based tenacity policy

        Raises:
            EmbeddingError: No API key and no client
        """
        key = (api_key or "").strip()
        if client is None and not key:
            raise EmbeddingError("GOOGLE_API_KEY not configured")

        self._client = client or genai.Client(api_key=key)
        self._model_id = (model_id or self.MODEL_ID).strip()
        self._batch_limit = max(1, batch_limit or self.BATCH_LIMIT)
        self._embed_content = (retry_decorator or create_retry_decorator())(
            self._client.models.embed_content
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        texts = list(texts)
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_limit):
            vectors += self._request(texts[start : start + self._batch_limit], TASK_DOCUMENT)

        if texts:
            logger.info(
                "Embedded document chunks",
                extra={
                    "model_id": self._model_id,
                    "text_count": len(texts),
                    "requests": -(-len(texts) // self._batch_limit),
                },
            )
        return vectors

    def embed_query(self, query: str) -> list[float]:
        if not (query or "").strip():
            raise EmbeddingError("Query must not be empty")
        return self._request([query], TASK_QUERY)[0]

    def _request(self, contents: list[str], task_type: str) -> list[list[float]]:
        try:
            response = self._embed_content(
                model=self._model_id,
                contents=contents,
                config={"task_type": task_type},
            )
        except Exception as exc:
            logger.error(
                "embed_content failed",
                exc_info=True,
                extra={
                    "model_id": self._model_id,
                    "task_type": task_type,
                    "batch_size": len(contents),
                },
            )
            raise EmbeddingError(
                f"Embedding provider call failed ({type(exc).__name__})",
                original_error=exc,
            ) from exc

        return _vectors_from_response(response, len(contents))
