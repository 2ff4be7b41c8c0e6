"""
Name: Answer Query Use Case Unit Tests

Responsibilities:
  - Verify numbered citations in the system prompt and the sources footer
  - Verify the fixed message when nothing was retrieved (no provider call)
  - Verify degradation to raw text when the provider is unavailable

Notes:
  - Completion provider is a Mock; prompt template is the packaged v1 file
"""

import pytest

from rag_tutorial.application.use_cases import AnswerQueryInput, AnswerQueryUseCase
from rag_tutorial.application.use_cases.answer_query import (
    EMPTY_COMPLETION,
    NO_RELEVANT_INFORMATION,
    PROVIDER_FALLBACK_PREFIX,
)
from rag_tutorial.exceptions import EmbeddingError, ProviderUnavailable
from rag_tutorial.infrastructure.repositories import InMemoryVectorStore

pytestmark = pytest.mark.unit


@pytest.fixture
def use_case(mock_store, mock_embedding_service, mock_completion_service, prompt_loader):
    return AnswerQueryUseCase(
        store=mock_store,
        embedding_service=mock_embedding_service,
        completion_service=mock_completion_service,
        prompt_loader=prompt_loader,
        default_model="gemini-1.5-flash",
    )


class TestSynthesize:
    def test_no_results_returns_fixed_message(self, use_case, mock_completion_service):
        """R: Should answer with the fixed message and never call the provider."""
        answer = use_case.synthesize("What is RAG?", [])

        assert answer.answer == NO_RELEVANT_INFORMATION
        assert answer.grounded is False
        assert answer.sources == []
        mock_completion_service.complete.assert_not_called()

    def test_prompt_numbers_results_and_calls_provider_once(
        self, use_case, mock_completion_service, sample_results
    ):
        """R: Should cite results as [1], [2] in the system prompt."""
        use_case.synthesize("How are chunks ranked?", sample_results)

        mock_completion_service.complete.assert_called_once()
        kwargs = mock_completion_service.complete.call_args.kwargs
        assert "[1] Spring AI wraps chat and embedding models." in kwargs["system_prompt"]
        assert "[2] Vector stores rank chunks by cosine similarity." in kwargs["system_prompt"]
        assert "{context}" not in kwargs["system_prompt"]
        assert kwargs["user_input"] == "How are chunks ranked?"
        assert kwargs["model"] == "gemini-1.5-flash"

    def test_answer_ends_with_sources_footer(self, use_case, sample_results):
        """R: Should list each result's file name, Unknown file when missing."""
        answer = use_case.synthesize("q", sample_results)

        assert answer.grounded is True
        assert answer.answer == (
            "Generated answer citing [1]."
            "\n\nSources:\n[1] spring-ai.pdf\n[2] Unknown file"
        )
        assert answer.sources == sample_results

    def test_explicit_model_is_forwarded(
        self, use_case, mock_completion_service, sample_results
    ):
        use_case.synthesize("q", sample_results, model="gemini-1.5-pro")

        assert mock_completion_service.complete.call_args.kwargs["model"] == "gemini-1.5-pro"

    def test_empty_completion_gets_placeholder(
        self, use_case, mock_completion_service, sample_results
    ):
        mock_completion_service.complete.return_value = "   "

        answer = use_case.synthesize("q", sample_results)

        assert answer.answer.startswith(EMPTY_COMPLETION + "\n\nSources:")

    def test_provider_unavailable_degrades_to_raw_text(
        self, use_case, mock_completion_service, sample_results
    ):
        """R: Should return raw retrieved text instead of raising."""
        mock_completion_service.complete.side_effect = ProviderUnavailable(
            "Completion provider failed", original_error=TimeoutError("timed out")
        )

        answer = use_case.synthesize("q", sample_results)

        assert answer.grounded is False
        assert answer.answer == (
            PROVIDER_FALLBACK_PREFIX
            + "Spring AI wraps chat and embedding models."
            + "\n\n"
            + "Vector stores rank chunks by cosine similarity."
        )
        assert "[1]" not in answer.answer
        assert "Sources:" not in answer.answer
        assert answer.sources == sample_results

    def test_unexpected_errors_are_not_swallowed(
        self, use_case, mock_completion_service, sample_results
    ):
        """R: Should only absorb ProviderUnavailable."""
        mock_completion_service.complete.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            use_case.synthesize("q", sample_results)


class TestExecute:
    def test_retrieves_then_synthesizes(
        self, use_case, mock_store, mock_embedding_service, sample_results
    ):
        mock_store.similarity_search.return_value = sample_results

        answer = use_case.execute(AnswerQueryInput(query="q", max_results=2))

        mock_embedding_service.embed_query.assert_called_once_with("q")
        mock_store.similarity_search.assert_called_once_with([0.1, 0.2, 0.3], max_results=2)
        assert answer.grounded is True
        assert answer.metadata["chunks_found"] == 2
        assert "total_ms" in answer.metadata

    def test_empty_store_gives_fixed_message(
        self, mock_embedding_service, mock_completion_service, prompt_loader
    ):
        """R: Should fall back to the fixed message on an empty store."""
        use_case = AnswerQueryUseCase(
            store=InMemoryVectorStore(),
            embedding_service=mock_embedding_service,
            completion_service=mock_completion_service,
            prompt_loader=prompt_loader,
            default_model="gemini-1.5-flash",
        )

        answer = use_case.execute(AnswerQueryInput(query="anything"))

        assert answer.answer == NO_RELEVANT_INFORMATION
        mock_completion_service.complete.assert_not_called()

    def test_non_positive_max_results_skips_retrieval(
        self, use_case, mock_embedding_service, mock_completion_service
    ):
        answer = use_case.execute(AnswerQueryInput(query="q", max_results=0))

        assert answer.answer == NO_RELEVANT_INFORMATION
        mock_embedding_service.embed_query.assert_not_called()
        mock_completion_service.complete.assert_not_called()

    def test_query_embedding_failure_propagates(self, use_case, mock_embedding_service):
        mock_embedding_service.embed_query.side_effect = EmbeddingError("down")

        with pytest.raises(EmbeddingError):
            use_case.execute(AnswerQueryInput(query="q"))
