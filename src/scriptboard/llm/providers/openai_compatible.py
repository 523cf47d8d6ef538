"""Generic OpenAI-compatible API provider."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx

from scriptboard.config import get_logger
from scriptboard.exceptions import LLMProviderError
from scriptboard.llm.base import BaseLLMProvider
from scriptboard.llm.models import CompletionRequest, CompletionResponse, LLMProvider

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAICompatibleProvider(BaseLLMProvider):
    """Chat completions against any OpenAI-compatible endpoint."""

    provider_type = LLMProvider.OPENAI_COMPATIBLE
    default_model = DEFAULT_MODEL

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize OpenAI-compatible provider.

        Args:
            endpoint: API base URL, e.g. ``http://localhost:1234/v1``.
            api_key: API key sent as a bearer token.
            timeout: HTTP request timeout in seconds.
            client: Optional preconfigured HTTP client.
        """
        self.base_url = (endpoint or "").rstrip("/")
        self.api_key = api_key or ""
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        # Semaphore to prevent concurrent requests for local LLM servers
        self._request_semaphore = asyncio.Semaphore(1)

        logger.debug(
            "Initialized OpenAI-compatible provider",
            endpoint=self.base_url if self.base_url else "not configured",
            has_api_key=bool(self.api_key),
            timeout=timeout,
        )

    async def is_available(self) -> bool:
        """Check if endpoint and API key are configured."""
        return bool(self.base_url and self.api_key)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate completion using OpenAI-compatible API.

        Raises:
            LLMProviderError: If the provider is not configured, the API
                returns an error status, or the response cannot be parsed.
        """
        if not self.base_url or not self.api_key:
            raise LLMProviderError(
                message="OpenAI-compatible endpoint not configured",
                hint="Set llm_endpoint and llm_api_key",
            )

        # Use semaphore to prevent concurrent requests for local LLM servers
        async with self._request_semaphore:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            }

            payload: dict[str, Any] = {
                "model": request.model or self.default_model,
                "messages": request.messages,
                "temperature": request.temperature,
                "top_p": request.top_p,
            }

            if request.max_tokens:
                payload["max_tokens"] = request.max_tokens
            if request.system:
                system_msg: list[dict[str, str]] = [
                    {"role": "system", "content": request.system}
                ]
                payload["messages"] = system_msg + request.messages

            completions_url = f"{self.base_url}/chat/completions"
            logger.info(
                "Sending OpenAI-compatible completion request",
                endpoint=completions_url,
                model=payload["model"],
                message_count=len(request.messages),
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )

            try:
                response = await self.client.post(
                    completions_url,
                    headers=headers,
                    json=payload,
                )
            except httpx.HTTPError as e:
                logger.error(
                    "OpenAI-compatible completion failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    endpoint=completions_url,
                    model=payload["model"],
                )
                raise LLMProviderError(
                    message=f"OpenAI-compatible request failed: {e}",
                    details={"endpoint": completions_url},
                ) from e

            if response.status_code != 200:
                error_text = response.text
                logger.error(
                    "OpenAI-compatible API error",
                    status_code=response.status_code,
                    error_text=error_text[:500],
                    endpoint=completions_url,
                    model=payload["model"],
                )
                raise LLMProviderError(
                    message=f"API error {response.status_code}",
                    details={"response": error_text[:500]},
                )

            try:
                data: dict[str, Any] = response.json()
                result = CompletionResponse(
                    id=data.get("id", ""),
                    model=data.get("model", payload["model"]),
                    choices=data.get("choices", []),
                    usage=data.get("usage", {}),
                    provider=self.provider_type,
                )
            except (json.JSONDecodeError, KeyError, ValueError) as e:
                # json.JSONDecodeError: Invalid JSON in response
                # ValueError: pydantic rejected the response shape
                logger.error(
                    "OpenAI-compatible completion response parsing failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    endpoint=completions_url,
                )
                raise LLMProviderError(f"Invalid API response: {e}") from e

            logger.info(
                "OpenAI-compatible completion successful",
                model=result.model,
                response_length=len(result.content),
                usage=data.get("usage", {}),
            )
            return result
