"""
Name: Fake Completion Service (Deterministic)

Responsibilities:
  - Provide deterministic completions for testing/CI
  - Avoid external dependencies (no API calls)
"""

from __future__ import annotations

import hashlib

from ...logger import logger


def _build_answer(system_prompt: str, user_input: str, model: str) -> str:
    digest = hashlib.sha256(
        f"{model}|{system_prompt}|{user_input}".encode("utf-8")
    ).hexdigest()[:16]
    return f"Simulated answer ({digest}) for: {user_input}"


class FakeCompletionService:
    """R: Deterministic CompletionService for tests/CI."""

    MODEL_ID = "fake-llm-v1"

    def __init__(self) -> None:
        logger.info("FakeCompletionService initialized")

    def complete(self, system_prompt: str, user_input: str, model: str) -> str:
        return _build_answer(system_prompt, user_input, model or self.MODEL_ID)
