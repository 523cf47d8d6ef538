"""LLM provider implementations."""

from __future__ import annotations

from scriptboard.llm.providers.gemini import GeminiProvider
from scriptboard.llm.providers.openai_compatible import OpenAICompatibleProvider

__all__ = [
    "GeminiProvider",
    "OpenAICompatibleProvider",
]
