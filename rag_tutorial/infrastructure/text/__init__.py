"""Text processing"""

from .chunker import TokenTextChunker, chunk_tokens

__all__ = ["TokenTextChunker", "chunk_tokens"]
