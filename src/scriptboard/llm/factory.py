"""Factory functions for creating LLM providers."""

from scriptboard.config import ScriptBoardSettings, get_settings
from scriptboard.exceptions import ConfigurationError

from .base import BaseLLMProvider
from .models import LLMProvider
from .providers import GeminiProvider, OpenAICompatibleProvider


def create_llm_provider(settings: ScriptBoardSettings | None = None) -> BaseLLMProvider:
    """Create the provider named by ``settings.llm_provider``.

    Args:
        settings: Settings to read. Defaults to the global settings.

    Returns:
        Configured provider instance. The caller closes it.

    Raises:
        ConfigurationError: If the provider name is unknown.
    """
    settings = settings or get_settings()

    if settings.llm_provider == LLMProvider.GEMINI.value:
        return GeminiProvider(
            api_key=settings.llm_api_key,
            endpoint=settings.llm_endpoint,
            timeout=settings.llm_timeout,
        )
    if settings.llm_provider == LLMProvider.OPENAI_COMPATIBLE.value:
        return OpenAICompatibleProvider(
            endpoint=settings.llm_endpoint,
            api_key=settings.llm_api_key,
            timeout=settings.llm_timeout,
        )
    raise ConfigurationError(
        message=f"Unknown LLM provider: {settings.llm_provider}",
        hint="Use 'gemini' or 'openai_compatible'",
        details={"llm_provider": settings.llm_provider},
    )
