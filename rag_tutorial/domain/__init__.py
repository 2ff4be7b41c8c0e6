"""Domain layer exports"""

from .entities import (
    Chunk,
    SearchResult,
    RagAnswer,
    ChatSuccess,
    ChatFailure,
    ChatResult,
    StormDocument,
    StormChat,
    StormContext,
    StormAnswer,
)
from .repositories import VectorStore
from .services import (
    EmbeddingService,
    CompletionService,
    TextChunkerService,
    DocumentTextExtractor,
    StormService,
)

__all__ = [
    "Chunk",
    "SearchResult",
    "RagAnswer",
    "ChatSuccess",
    "ChatFailure",
    "ChatResult",
    "VectorStore",
    "EmbeddingService",
    "CompletionService",
    "TextChunkerService",
    "DocumentTextExtractor",
    "StormService",
    "StormDocument",
    "StormChat",
    "StormContext",
    "StormAnswer",
]
