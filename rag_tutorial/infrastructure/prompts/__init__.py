"""
Prompt infrastructure module.
"""

from .loader import PromptLoader, get_prompt_loader

__all__ = ["PromptLoader", "get_prompt_loader"]
