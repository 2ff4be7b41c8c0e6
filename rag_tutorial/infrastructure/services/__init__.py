"""Infrastructure services"""

from .fake_completion_service import FakeCompletionService
from .fake_embedding_service import FakeEmbeddingService
from .google_completion_service import GoogleCompletionService
from .google_embedding_service import GoogleEmbeddingService
from .retry import (
    is_transient_error,
    create_retry_decorator,
    TRANSIENT_HTTP_CODES,
    PERMANENT_HTTP_CODES,
)
from .storm_client import StormClient

__all__ = [
    "FakeCompletionService",
    "FakeEmbeddingService",
    "GoogleCompletionService",
    "GoogleEmbeddingService",
    "StormClient",
    "is_transient_error",
    "create_retry_decorator",
    "TRANSIENT_HTTP_CODES",
    "PERMANENT_HTTP_CODES",
]
