"""
Name: Search Chunks Use Case

Responsibilities:
  - Embed the query with the same provider used at ingestion
  - Return the top max_results chunks by cosine similarity

Collaborators:
  - domain/services.EmbeddingService: query embedding
  - domain/repositories.VectorStore: similarity search

Constraints:
  - Non-positive max_results returns [] without calling the provider
  - EmbeddingError propagates to the caller
"""

from dataclasses import dataclass
from typing import List

from ...domain.entities import SearchResult
from ...domain.repositories import VectorStore
from ...domain.services import EmbeddingService
from ...logger import logger


@dataclass
class SearchChunksInput:
    query: str
    max_results: int = 3


@dataclass
class SearchChunksOutput:
    results: List[SearchResult]


class SearchChunksUseCase:
    """R: Retrieval only (no generation)."""

    def __init__(self, store: VectorStore, embedding_service: EmbeddingService):
        self.store = store
        self.embedding_service = embedding_service

    def execute(self, input_data: SearchChunksInput) -> SearchChunksOutput:
        if input_data.max_results <= 0:
            return SearchChunksOutput(results=[])

        query_embedding = self.embedding_service.embed_query(input_data.query)
        results = self.store.similarity_search(
            query_embedding, max_results=input_data.max_results
        )

        logger.info(
            "Similarity search completed",
            extra={
                "max_results": input_data.max_results,
                "results_found": len(results),
            },
        )
        return SearchChunksOutput(results=results)
