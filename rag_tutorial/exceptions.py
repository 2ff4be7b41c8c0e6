"""
Name: Application Error Kinds

Responsibilities:
  - Name each way a RAG or Storm operation can fail
  - Keep the upstream exception (original_error) on every error
  - Give each raised error a UUID error_id for log correlation

Collaborators:
  - exception_handlers.py: maps each kind to an HTTP status
  - application/use_cases: raise and catch these by name

Constraints:
  - Callers recovering from a failure catch a specific kind, never RAGError

Notes:
  - ExtractionError is a DocumentProcessingError: a failed upload is a
    failed ingestion
"""

from typing import Dict, Optional
from uuid import uuid4


class RAGError(Exception):
    """Base class; error_code is overridden per kind."""

    error_code: str = "RAG_ERROR"

    def __init__(
        self,
        message: str,
        error_id: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or uuid4().hex
        self.original_error = original_error

    def to_response(self) -> Dict[str, str]:
        """R: Client-safe summary (the cause is logged, never returned)."""
        return {
            "error_code": self.error_code,
            "error_id": self.error_id,
            "message": self.message,
        }


class DocumentProcessingError(RAGError):
    """Ingestion failed; nothing from the document was stored."""

    error_code = "DOCUMENT_PROCESSING_ERROR"


class ExtractionError(DocumentProcessingError):
    """Text could not be extracted from an uploaded file."""

    error_code = "EXTRACTION_ERROR"


class EmbeddingError(RAGError):
    """The embedding provider failed or answered with an unusable payload."""

    error_code = "EMBEDDING_ERROR"


class ProviderUnavailable(RAGError):
    """The completion provider could not produce a response."""

    error_code = "PROVIDER_UNAVAILABLE"


class StormAPIError(RAGError):
    """Storm API request failed or returned an unreadable payload."""

    error_code = "STORM_API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_id: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message, error_id=error_id, original_error=original_error)
        self.status_code = status_code
