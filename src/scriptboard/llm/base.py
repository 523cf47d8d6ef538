"""Base class for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from scriptboard.llm.models import CompletionRequest, CompletionResponse, LLMProvider


class BaseLLMProvider(ABC):
    """Base class for LLM providers."""

    provider_type: LLMProvider
    default_model: str

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate text completion."""
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if provider is configured."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release network resources."""
        pass

    async def __aenter__(self) -> BaseLLMProvider:
        """Enter async context manager."""
        return self

    async def __aexit__(self, *_: Any) -> None:
        """Exit async context manager and cleanup."""
        await self.aclose()
