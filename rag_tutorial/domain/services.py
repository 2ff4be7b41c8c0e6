"""
Name: Domain Service Interfaces

Responsibilities:
  - Define contracts for external services (embeddings, completion)
  - Define contracts for text chunking and file text extraction
  - Enable dependency inversion (use cases don't depend on any provider)

Collaborators:
  - Implementations in infrastructure.services, infrastructure.text,
    infrastructure.parsers

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Provider failures surface as EmbeddingError / ProviderUnavailable /
    ExtractionError, never as raw SDK exceptions

Notes:
  - Implementations can swap between providers without changing use cases
"""

from typing import List, Protocol

from .entities import StormAnswer, StormDocument


class EmbeddingService(Protocol):
    """
    R: Interface for text embedding generation.

    Implementations must provide:
      - Batch embedding for documents
      - Single embedding for queries
      - Consistent dimensionality across embed_batch and embed_query
    """

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        R: Generate embeddings for multiple texts (document ingestion).

        Raises:
            EmbeddingError: If the provider fails
        """
        ...

    def embed_query(self, query: str) -> List[float]:
        """
        R: Generate embedding for a single query (search).

        Raises:
            EmbeddingError: If the provider fails
        """
        ...


class CompletionService(Protocol):
    """
    R: Interface for a chat completion provider.
    """

    def complete(self, system_prompt: str, user_input: str, model: str) -> str:
        """
        R: Run one completion call.

        Args:
            system_prompt: Instructions (and grounding context, for RAG)
            user_input: The user's message
            model: Provider model identifier

        Returns:
            Generated text (may be empty)

        Raises:
            ProviderUnavailable: If the provider fails
        """
        ...


class TextChunkerService(Protocol):
    """
    R: Interface for splitting text into embeddable chunks.
    """

    def chunk(self, text: str) -> List[str]:
        """R: Split text into chunks (may return an empty list)."""
        ...


class DocumentTextExtractor(Protocol):
    """
    R: Interface for turning an uploaded file into plain text.
    """

    def extract_text(
        self, file_name: str, content: bytes, content_type: str | None = None
    ) -> str:
        """
        R: Extract text from file bytes.

        Raises:
            ExtractionError: If the file type is unsupported or unreadable
        """
        ...


class StormService(Protocol):
    """
    R: Interface for the hosted Storm document Q&A API.
    """

    def upload_document(
        self, file_name: str, content: bytes, bucket_id: str
    ) -> StormDocument:
        """
        R: Upload a file into a Storm bucket.

        Raises:
            StormAPIError: If the request fails
        """
        ...

    def answer(self, question: str, bucket_ids: List[str]) -> StormAnswer:
        """
        R: Ask a question against one or more buckets.

        Raises:
            StormAPIError: If the request fails
        """
        ...
