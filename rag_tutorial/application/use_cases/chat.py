"""
Name: Chat Use Case

Responsibilities:
  - Send one user message (plus a system message) to the completion provider
  - Return an explicit ChatSuccess / ChatFailure result

Collaborators:
  - domain.services.CompletionService: completion call

Constraints:
  - Only ProviderUnavailable becomes ChatFailure; other errors propagate
"""

from dataclasses import dataclass
from typing import Optional

from ...domain.entities import ChatFailure, ChatResult, ChatSuccess
from ...domain.services import CompletionService
from ...exceptions import ProviderUnavailable
from ...logger import logger

DEFAULT_SYSTEM_MESSAGE = "You are a helpful AI assistant."


@dataclass
class ChatInput:
    user_input: str
    model: Optional[str] = None
    system_message: Optional[str] = None


class ChatUseCase:
    """R: Plain (non-RAG) chat completion."""

    def __init__(self, completion_service: CompletionService, default_model: str):
        self.completion_service = completion_service
        self.default_model = default_model

    def execute(self, input_data: ChatInput) -> ChatResult:
        if not (input_data.user_input or "").strip():
            raise ValueError("user_input must not be empty")

        model_id = (input_data.model or "").strip() or self.default_model
        system_message = (
            input_data.system_message or ""
        ).strip() or DEFAULT_SYSTEM_MESSAGE

        try:
            answer = self.completion_service.complete(
                system_prompt=system_message,
                user_input=input_data.user_input,
                model=model_id,
            )
        except ProviderUnavailable as exc:
            logger.warning(
                "Chat completion failed",
                extra={"error_id": exc.error_id, "model_id": model_id},
            )
            return ChatFailure(reason=exc.message, error_code=exc.error_code)

        return ChatSuccess(answer=answer, model=model_id)
