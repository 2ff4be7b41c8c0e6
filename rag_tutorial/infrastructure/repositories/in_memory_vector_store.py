"""
Name: In-Memory Vector Store

Responsibilities:
  - Hold every ingested chunk in insertion order
  - Rank chunks by cosine similarity with a brute-force numpy scan
  - Enforce one embedding dimensionality across the store

Collaborators:
  - domain.repositories.VectorStore: implemented contract
  - numpy: vector math

Constraints:
  - No persistence; contents live as long as the process (or until reset)
  - add_chunks validates the whole batch before appending anything
  - Ties keep insertion order (stable sort)

Notes:
  - O(stored chunks x dimension) per query
  - The embedding matrix is rebuilt lazily after writes
"""

from threading import Lock
from typing import List, Optional, Sequence

import numpy as np

from ...domain.entities import DOCUMENT_ID_KEY, Chunk, SearchResult
from ...domain.repositories import VectorStore
from ...logger import logger


class InMemoryVectorStore(VectorStore):
    """
    R: Thread-safe in-memory vector store.
    """

    def __init__(self):
        self._lock = Lock()
        self._chunks: List[Chunk] = []
        self._dimension: Optional[int] = None
        self._matrix: Optional[np.ndarray] = None
        self._norms: Optional[np.ndarray] = None

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def add_chunks(self, chunks: Sequence[Chunk]) -> None:
        if not chunks:
            return

        with self._lock:
            dimension = self._dimension
            for chunk in chunks:
                size = len(chunk.embedding)
                if size == 0:
                    raise ValueError(f"Chunk {chunk.id} has an empty embedding")
                if dimension is None:
                    dimension = size
                elif size != dimension:
                    raise ValueError(
                        f"Embedding dimension mismatch: expected {dimension}, "
                        f"got {size} for chunk {chunk.id}"
                    )

            self._chunks.extend(chunks)
            self._dimension = dimension
            self._matrix = None
            self._norms = None
            total = len(self._chunks)

        logger.info(
            "InMemoryVectorStore: chunks added",
            extra={"added": len(chunks), "total": total},
        )

    def similarity_search(
        self, query_embedding: Sequence[float], max_results: int
    ) -> List[SearchResult]:
        if max_results <= 0:
            raise ValueError(f"max_results must be > 0, got {max_results}")

        with self._lock:
            if not self._chunks:
                return []

            query = np.asarray(query_embedding, dtype=np.float64)
            if query.shape != (self._dimension,):
                raise ValueError(
                    f"Query dimension mismatch: expected {self._dimension}, "
                    f"got {query.shape[0] if query.ndim == 1 else query.shape}"
                )

            matrix, norms = self._embedding_matrix()
            scores = self._cosine_scores(matrix, norms, query)

            # R: Stable sort on negated scores keeps insertion order for ties
            order = np.argsort(-scores, kind="stable")[:max_results]
            return [self._to_result(self._chunks[i], float(scores[i])) for i in order]

    def count(self) -> int:
        with self._lock:
            return len(self._chunks)

    def reset(self) -> None:
        with self._lock:
            self._chunks = []
            self._dimension = None
            self._matrix = None
            self._norms = None

    def _embedding_matrix(self) -> tuple[np.ndarray, np.ndarray]:
        if self._matrix is None:
            self._matrix = np.asarray(
                [chunk.embedding for chunk in self._chunks], dtype=np.float64
            )
            self._norms = np.linalg.norm(self._matrix, axis=1)
        return self._matrix, self._norms

    @staticmethod
    def _cosine_scores(
        matrix: np.ndarray, norms: np.ndarray, query: np.ndarray
    ) -> np.ndarray:
        query_norm = np.linalg.norm(query)
        denominators = norms * query_norm
        dots = matrix @ query
        # R: Zero-norm vectors score 0 instead of NaN
        scores = np.zeros_like(dots)
        np.divide(dots, denominators, out=scores, where=denominators > 0)
        return scores

    @staticmethod
    def _to_result(chunk: Chunk, score: float) -> SearchResult:
        metadata = {k: v for k, v in chunk.metadata.items() if k != DOCUMENT_ID_KEY}
        return SearchResult(
            id=chunk.id,
            document_id=chunk.document_id,
            text=chunk.text,
            metadata=metadata,
            score=score,
        )
