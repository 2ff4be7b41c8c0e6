"""
Name: Deterministic Embedding Stub

Responsibilities:
  - Stand in for Gemini embeddings when FAKE_EMBEDDINGS is set
  - Produce 768-dim vectors, the same width as text-embedding-004

Constraints:
  - No network, no randomness across runs: the text alone seeds the vector
  - Vectors have unit L2 norm, so a text scores 1.0 against itself

Notes:
  - Different texts land on near-orthogonal vectors; this is not semantic
"""

from __future__ import annotations

import hashlib
from typing import List, Sequence

import numpy as np

from ...domain.services import EmbeddingService
from ...logger import logger

EMBEDDING_DIMENSION = 768


def _seeded_unit_vector(text: str) -> List[float]:
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
    vector = np.random.default_rng(seed).standard_normal(EMBEDDING_DIMENSION)
    return (vector / np.linalg.norm(vector)).tolist()


class FakeEmbeddingService(EmbeddingService):
    MODEL_ID = "fake-embedding-v1"

    def __init__(self) -> None:
        logger.info(
            "Using deterministic embeddings",
            extra={"model_id": self.MODEL_ID, "dimension": EMBEDDING_DIMENSION},
        )

    @property
    def model_id(self) -> str:
        return self.MODEL_ID

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        return [_seeded_unit_vector(text) for text in texts]

    def embed_query(self, query: str) -> List[float]:
        return _seeded_unit_vector(query)
