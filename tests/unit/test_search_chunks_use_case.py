"""
Name: Search Chunks Use Case Unit Tests
"""

import pytest

from rag_tutorial.application.use_cases import SearchChunksInput, SearchChunksUseCase
from rag_tutorial.exceptions import EmbeddingError

pytestmark = pytest.mark.unit


def test_embeds_query_and_searches_store(mock_store, mock_embedding_service, sample_results):
    """R: Should embed the query and pass max_results to the store."""
    mock_store.similarity_search.return_value = sample_results
    use_case = SearchChunksUseCase(mock_store, mock_embedding_service)

    output = use_case.execute(SearchChunksInput(query="vector stores", max_results=2))

    assert output.results == sample_results
    mock_embedding_service.embed_query.assert_called_once_with("vector stores")
    mock_store.similarity_search.assert_called_once_with([0.1, 0.2, 0.3], max_results=2)


def test_non_positive_max_results_skips_provider(mock_store, mock_embedding_service):
    """R: Should return nothing and call nothing when max_results <= 0."""
    use_case = SearchChunksUseCase(mock_store, mock_embedding_service)

    output = use_case.execute(SearchChunksInput(query="q", max_results=0))

    assert output.results == []
    mock_embedding_service.embed_query.assert_not_called()
    mock_store.similarity_search.assert_not_called()


def test_embedding_error_propagates(mock_store, mock_embedding_service):
    mock_embedding_service.embed_query.side_effect = EmbeddingError("down")
    use_case = SearchChunksUseCase(mock_store, mock_embedding_service)

    with pytest.raises(EmbeddingError):
        use_case.execute(SearchChunksInput(query="q", max_results=3))
