"""
Name: Domain Repository Interfaces

Responsibilities:
  - Define the contract for chunk storage and vector similarity search
  - Enable dependency inversion (use cases don't depend on numpy or a database)

Collaborators:
  - domain.entities: Chunk, SearchResult
  - Implementations in infrastructure.repositories

Constraints:
  - Pure interfaces (Protocol), no implementation
  - add_chunks is all-or-nothing

Notes:
  - Using typing.Protocol for structural subtyping (duck typing)
  - Enables testing with mock stores
"""

from typing import List, Protocol, Sequence

from .entities import Chunk, SearchResult


class VectorStore(Protocol):
    """
    R: Interface for chunk storage with similarity search.

    Implementations must provide:
      - Atomic append of a document's chunks
      - Cosine similarity ranking, ties broken by insertion order
      - A single fixed embedding dimensionality across stored chunks
    """

    def add_chunks(self, chunks: Sequence[Chunk]) -> None:
        """
        R: Append chunks; either all are stored or none.

        Raises:
            ValueError: If embeddings disagree on dimensionality
        """
        ...

    def similarity_search(
        self, query_embedding: Sequence[float], max_results: int
    ) -> List[SearchResult]:
        """
        R: Return up to max_results chunks by descending cosine similarity.

        Raises:
            ValueError: If max_results <= 0 or dimensions mismatch
        """
        ...

    def count(self) -> int:
        """R: Number of stored chunks."""
        ...

    def reset(self) -> None:
        """R: Drop every stored chunk."""
        ...
