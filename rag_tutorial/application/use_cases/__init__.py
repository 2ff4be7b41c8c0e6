"""Application use cases"""

from .answer_query import AnswerQueryUseCase, AnswerQueryInput
from .chat import ChatUseCase, ChatInput
from .ingest_document import (
    IngestDocumentUseCase,
    IngestDocumentInput,
    IngestDocumentOutput,
)
from .search_chunks import SearchChunksUseCase, SearchChunksInput, SearchChunksOutput
from .storm import (
    StormUploadUseCase,
    StormUploadInput,
    StormQueryUseCase,
    StormQueryInput,
)
from .upload_document import UploadDocumentUseCase, UploadDocumentInput

__all__ = [
    "AnswerQueryUseCase",
    "AnswerQueryInput",
    "ChatUseCase",
    "ChatInput",
    "IngestDocumentUseCase",
    "IngestDocumentInput",
    "IngestDocumentOutput",
    "SearchChunksUseCase",
    "SearchChunksInput",
    "SearchChunksOutput",
    "StormUploadUseCase",
    "StormUploadInput",
    "StormQueryUseCase",
    "StormQueryInput",
    "UploadDocumentUseCase",
    "UploadDocumentInput",
]
