"""Infrastructure repositories"""

from .in_memory_vector_store import InMemoryVectorStore

__all__ = ["InMemoryVectorStore"]
