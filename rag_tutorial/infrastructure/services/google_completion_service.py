"""
Name: Google Gemini Completion Service Implementation (Adapter)

Responsibilities:
  - Implement CompletionService with Gemini generate_content
  - Send the system prompt as system_instruction and the user input as contents
  - Retry transient errors with exponential backoff + jitter

Collaborators:
  - domain.services.CompletionService: Interface implementation
  - google.genai: Google Gen AI SDK
  - retry: Resilience helper for transient errors

Constraints:
  - Every SDK failure surfaces as ProviderUnavailable with the cause attached
  - The model is chosen per call; the constructor only sets a default
"""

from __future__ import annotations

from typing import Callable

from google import genai
from google.genai import types

from ...domain.services import CompletionService
from ...exceptions import ProviderUnavailable
from ...logger import logger
from .retry import create_retry_decorator


class GoogleCompletionService(CompletionService):
    """
    R: Google Gemini implementation of CompletionService.
    """

    DEFAULT_MODEL_ID = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        default_model: str | None = None,
        retry_decorator: Callable | None = None,
    ) -> None:
        """
        R: Initialize the service.

        Args:
            api_key: Google API key (injected by the container)
            client: Pre-built genai client (useful for tests)
            default_model: Model used when a call passes an empty model id
            retry_decorator: tenacity decorator (injectable for tests)

        Raises:
            ProviderUnavailable: If there is no API key and no client
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleCompletionService: GOOGLE_API_KEY not configured")
            raise ProviderUnavailable("GOOGLE_API_KEY not configured")

        self._client = client or genai.Client(api_key=resolved_key)
        self._default_model = (default_model or self.DEFAULT_MODEL_ID).strip()

        decorator = retry_decorator or create_retry_decorator()
        self._generate_content = decorator(self._client.models.generate_content)

        logger.info(
            "GoogleCompletionService initialized",
            extra={"default_model": self._default_model},
        )

    @property
    def default_model(self) -> str:
        return self._default_model

    def complete(self, system_prompt: str, user_input: str, model: str) -> str:
        model_id = (model or "").strip() or self._default_model

        try:
            response = self._generate_content(
                model=model_id,
                contents=user_input,
                config=types.GenerateContentConfig(system_instruction=system_prompt),
            )
        except Exception as exc:
            logger.error(
                "GoogleCompletionService: Generation failed",
                exc_info=True,
                extra={"model_id": model_id, "error_type": type(exc).__name__},
            )
            raise ProviderUnavailable(
                f"Completion provider failed for model {model_id}",
                original_error=exc,
            ) from exc

        text = (getattr(response, "text", "") or "").strip()
        logger.info(
            "GoogleCompletionService: Response generated",
            extra={"model_id": model_id, "answer_chars": len(text)},
        )
        return text
