"""
Name: Answer Query Use Case

Responsibilities:
  - Orchestrate the RAG flow: embed query -> retrieve -> synthesize answer
  - Number retrieved chunks as citations in the system prompt
  - Append a sources footer naming each chunk's original file
  - Degrade to raw retrieved text when the completion provider is down
  - Measure and report stage timings

Collaborators:
  - domain.repositories.VectorStore: similarity search
  - domain.services.EmbeddingService: query embedding
  - domain.services.CompletionService: answer generation
  - application.context_builder.ContextBuilder: citations, footer, fallback text
  - infrastructure.prompts.PromptLoader: versioned system prompt

Constraints:
  - No results: fixed message, the completion provider is never called
  - One completion call per query
  - ProviderUnavailable never escapes synthesize(); other errors do
"""

from dataclasses import dataclass
from typing import List, Optional

from ...domain.entities import RagAnswer, SearchResult
from ...domain.repositories import VectorStore
from ...domain.services import CompletionService, EmbeddingService
from ...exceptions import ProviderUnavailable
from ...infrastructure.prompts import PromptLoader
from ...logger import logger
from ...timing import StageTimings
from ..context_builder import ContextBuilder

NO_RELEVANT_INFORMATION = "No relevant information was found in the uploaded documents."
EMPTY_COMPLETION = "Unable to generate a response."
PROVIDER_FALLBACK_PREFIX = (
    "The AI model could not be reached. Returning search results only:\n\n"
)


@dataclass
class AnswerQueryInput:
    """
    R: Input data for AnswerQuery use case.

    Attributes:
        query: User's natural language question
        max_results: Number of chunks to retrieve (default: 3)
        model: Completion model (None uses the service default)
    """

    query: str
    max_results: int = 3
    model: Optional[str] = None


class AnswerQueryUseCase:
    """
    R: Use case for the complete RAG flow (retrieval + generation).
    """

    def __init__(
        self,
        store: VectorStore,
        embedding_service: EmbeddingService,
        completion_service: CompletionService,
        prompt_loader: PromptLoader,
        default_model: str,
        context_builder: ContextBuilder | None = None,
    ):
        self.store = store
        self.embedding_service = embedding_service
        self.completion_service = completion_service
        self.prompt_loader = prompt_loader
        self.default_model = default_model
        self.context_builder = context_builder or ContextBuilder()

    def execute(self, input_data: AnswerQueryInput) -> RagAnswer:
        """
        R: Embed query, retrieve chunks and synthesize an answer.

        Raises:
            EmbeddingError: If the query cannot be embedded
        """
        timings = StageTimings()
        results: List[SearchResult] = []

        if input_data.max_results > 0:
            with timings.measure("embed"):
                query_embedding = self.embedding_service.embed_query(input_data.query)
            with timings.measure("retrieve"):
                results = self.store.similarity_search(
                    query_embedding, max_results=input_data.max_results
                )

        with timings.measure("llm"):
            answer = self.synthesize(input_data.query, results, input_data.model)

        answer.metadata.update(
            {
                "max_results": input_data.max_results,
                "chunks_found": len(results),
                **timings.to_dict(),
            }
        )
        logger.info("query answered", extra=answer.metadata)
        return answer

    def synthesize(
        self,
        query: str,
        results: List[SearchResult],
        model: Optional[str] = None,
    ) -> RagAnswer:
        """
        R: Build an answer from already retrieved results.

        Business Rules:
            1. No results: fixed message, no provider call
            2. Results numbered [1..n] in the system prompt
            3. Grounded answers end with a sources footer
            4. ProviderUnavailable: raw result texts, no exception
        """
        if not results:
            return RagAnswer(query=query, answer=NO_RELEVANT_INFORMATION, grounded=False)

        model_id = (model or "").strip() or self.default_model
        system_prompt = self.prompt_loader.format(self.context_builder.build(results))

        try:
            completion = self.completion_service.complete(
                system_prompt=system_prompt,
                user_input=query,
                model=model_id,
            )
        except ProviderUnavailable as exc:
            logger.warning(
                "Completion provider unavailable, returning retrieved text",
                extra={
                    "error_id": exc.error_id,
                    "model_id": model_id,
                    "chunks_found": len(results),
                },
            )
            return RagAnswer(
                query=query,
                answer=PROVIDER_FALLBACK_PREFIX + self.context_builder.raw_text(results),
                sources=list(results),
                grounded=False,
                metadata={"fallback_reason": exc.message},
            )

        answer = (completion or "").strip() or EMPTY_COMPLETION
        return RagAnswer(
            query=query,
            answer=answer + self.context_builder.sources_footer(results),
            sources=list(results),
            grounded=True,
            metadata={"model": model_id},
        )
