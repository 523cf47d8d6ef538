"""LLM integration module for ScriptBoard."""

from __future__ import annotations

from scriptboard.llm.base import BaseLLMProvider
from scriptboard.llm.factory import create_llm_provider
from scriptboard.llm.models import CompletionRequest, CompletionResponse, LLMProvider

__all__ = [
    "BaseLLMProvider",
    "CompletionRequest",
    "CompletionResponse",
    "LLMProvider",
    "create_llm_provider",
]
