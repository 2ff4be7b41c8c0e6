"""
Name: Ingest Document Use Case

Responsibilities:
  - Orchestrate ingestion: chunk -> embed -> append to store
  - Assign a document id when the caller gives none
  - Tag every chunk with its document id under the internal metadata key
  - Return document_id and chunks_created count

Collaborators:
  - domain/repositories.VectorStore: atomic append
  - domain/services.EmbeddingService: batch embedding
  - domain/services.TextChunkerService: text splitting

Constraints:
  - All or nothing: nothing reaches the store unless every chunk was embedded
  - Must NOT call the embedding provider if chunking returns empty
  - Failures surface as DocumentProcessingError carrying the cause
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
from uuid import uuid4

from ...domain.entities import DOCUMENT_ID_KEY, Chunk
from ...domain.repositories import VectorStore
from ...domain.services import EmbeddingService, TextChunkerService
from ...exceptions import DocumentProcessingError, EmbeddingError
from ...logger import logger


@dataclass
class IngestDocumentInput:
    text: str
    document_id: Optional[str] = None
    metadata: Optional[Dict[str, object]] = None


@dataclass
class IngestDocumentOutput:
    document_id: str
    chunks_created: int


def _stringify(metadata: Optional[Dict[str, object]]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in (metadata or {}).items() if v is not None}


class IngestDocumentUseCase:
    """
    R: Use case for text ingestion into the vector store.
    """

    def __init__(
        self,
        store: VectorStore,
        embedding_service: EmbeddingService,
        chunker: TextChunkerService,
    ):
        self.store = store
        self.embedding_service = embedding_service
        self.chunker = chunker

    def execute(self, input_data: IngestDocumentInput) -> IngestDocumentOutput:
        document_id = (input_data.document_id or "").strip() or str(uuid4())

        pieces = self.chunker.chunk(input_data.text)
        if not pieces:
            logger.info(
                "Document produced no chunks",
                extra={"document_id": document_id, "chars": len(input_data.text)},
            )
            return IngestDocumentOutput(document_id=document_id, chunks_created=0)

        try:
            embeddings = self.embedding_service.embed_batch(pieces)
        except EmbeddingError as exc:
            raise DocumentProcessingError(
                f"Failed to embed document {document_id}: {exc.message}",
                original_error=exc,
            ) from exc

        if len(embeddings) != len(pieces):
            raise DocumentProcessingError(
                f"Embedding count mismatch for document {document_id}: "
                f"expected {len(pieces)}, got {len(embeddings)}"
            )

        metadata = _stringify(input_data.metadata)
        metadata[DOCUMENT_ID_KEY] = document_id

        chunks: List[Chunk] = [
            Chunk(
                id=str(uuid4()),
                document_id=document_id,
                text=text,
                embedding=list(embedding),
                metadata=dict(metadata),
            )
            for text, embedding in zip(pieces, embeddings)
        ]

        try:
            self.store.add_chunks(chunks)
        except ValueError as exc:
            raise DocumentProcessingError(
                f"Failed to store document {document_id}: {exc}",
                original_error=exc,
            ) from exc

        logger.info(
            "Document ingested",
            extra={"document_id": document_id, "chunks_created": len(chunks)},
        )
        return IngestDocumentOutput(document_id=document_id, chunks_created=len(chunks))
