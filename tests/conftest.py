"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (fake providers, no .env file)
  - Provide reusable domain fixtures and protocol mocks
  - Provide an offline tokenizer for chunker tests

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - rag_tutorial.domain: Domain entities and protocols

Notes:
  - Environment is set before any rag_tutorial import that reads Settings
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("FAKE_LLM", "1")
os.environ.setdefault("FAKE_EMBEDDINGS", "1")
os.environ.setdefault("RETRY_BASE_DELAY_SECONDS", "0")
os.environ.setdefault("RETRY_MAX_DELAY_SECONDS", "0")

from typing import List, Sequence  # noqa: E402
from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402

from rag_tutorial import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from rag_tutorial.domain.entities import (  # noqa: E402
    DOCUMENT_ID_KEY,
    ORIGINAL_FILENAME_KEY,
    Chunk,
    SearchResult,
)
from rag_tutorial.domain.repositories import VectorStore  # noqa: E402
from rag_tutorial.domain.services import (  # noqa: E402
    CompletionService,
    EmbeddingService,
    TextChunkerService,
)
from rag_tutorial.infrastructure.prompts import PromptLoader  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


class CharTokenizer:
    """R: One token per character; keeps chunker tests offline and exact."""

    def encode(self, text: str) -> List[int]:
        return [ord(ch) for ch in text]

    def decode(self, tokens: Sequence[int]) -> str:
        return "".join(chr(t) for t in tokens)


@pytest.fixture
def char_tokenizer() -> CharTokenizer:
    return CharTokenizer()


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def sample_chunks() -> List[Chunk]:
    """R: Three chunks of one document with distinct 3-d embeddings."""
    embeddings = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]]
    return [
        Chunk(
            id=f"chunk-{i}",
            document_id="doc-1",
            text=f"Chunk {i} content for testing.",
            embedding=embedding,
            metadata={DOCUMENT_ID_KEY: "doc-1", ORIGINAL_FILENAME_KEY: "guide.pdf"},
        )
        for i, embedding in enumerate(embeddings)
    ]


@pytest.fixture
def sample_results() -> List[SearchResult]:
    """R: Two search results; only the first knows its file name."""
    return [
        SearchResult(
            id="chunk-a",
            document_id="doc-1",
            text="Spring AI wraps chat and embedding models.",
            metadata={ORIGINAL_FILENAME_KEY: "spring-ai.pdf"},
            score=0.92,
        ),
        SearchResult(
            id="chunk-b",
            document_id="doc-2",
            text="Vector stores rank chunks by cosine similarity.",
            metadata={},
            score=0.81,
        ),
    ]


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_store() -> Mock:
    store = Mock(spec=VectorStore)
    store.similarity_search.return_value = []
    store.count.return_value = 0
    return store


@pytest.fixture
def mock_embedding_service() -> Mock:
    service = Mock(spec=EmbeddingService)
    service.embed_query.return_value = [0.1, 0.2, 0.3]
    service.embed_batch.side_effect = lambda texts: [[0.1, 0.2, 0.3] for _ in texts]
    return service


@pytest.fixture
def mock_completion_service() -> Mock:
    service = Mock(spec=CompletionService)
    service.complete.return_value = "Generated answer citing [1]."
    return service


@pytest.fixture
def mock_chunker() -> Mock:
    chunker = Mock(spec=TextChunkerService)
    chunker.chunk.return_value = ["first piece of text", "second piece of text"]
    return chunker


@pytest.fixture
def prompt_loader() -> PromptLoader:
    return PromptLoader(version="v1")


@pytest.fixture
def clear_settings_cache():
    app_config.get_settings.cache_clear()
    yield
    app_config.get_settings.cache_clear()
