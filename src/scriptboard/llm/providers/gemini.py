"""Google Gemini generateContent provider."""

from __future__ import annotations

import json
from typing import Any

import httpx

from scriptboard.config import get_logger
from scriptboard.exceptions import LLMProviderError
from scriptboard.llm.base import BaseLLMProvider
from scriptboard.llm.models import CompletionRequest, CompletionResponse, LLMProvider

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiProvider(BaseLLMProvider):
    """Google Gemini provider using the REST generateContent API."""

    provider_type = LLMProvider.GEMINI
    default_model = DEFAULT_MODEL

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Gemini provider.

        Args:
            api_key: Google AI Studio API key.
            endpoint: API base URL. Defaults to the public v1beta endpoint.
            timeout: HTTP request timeout in seconds.
            client: Optional preconfigured HTTP client.
        """
        self.api_key = api_key or ""
        self.base_url = (endpoint or DEFAULT_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

        logger.debug(
            "Initialized Gemini provider",
            endpoint=self.base_url,
            has_api_key=bool(self.api_key),
            timeout=timeout,
        )

    async def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    def _payload(self, request: CompletionRequest) -> dict[str, Any]:
        contents = [
            {
                "role": "model" if message.get("role") == "assistant" else "user",
                "parts": [{"text": message.get("content", "")}],
            }
            for message in request.messages
        ]
        generation_config: dict[str, Any] = {
            "temperature": request.temperature,
            "topP": request.top_p,
        }
        if request.max_tokens:
            generation_config["maxOutputTokens"] = request.max_tokens

        payload: dict[str, Any] = {
            "contents": contents,
            "generationConfig": generation_config,
        }
        if request.system:
            payload["systemInstruction"] = {"parts": [{"text": request.system}]}
        return payload

    @staticmethod
    def _extract_text(data: dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(str(part.get("text", "")) for part in parts)

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate completion using the generateContent API.

        Raises:
            LLMProviderError: If no key is configured, the API returns an
                error status, or the response cannot be parsed.
        """
        if not self.api_key:
            raise LLMProviderError(
                message="Gemini API key not configured",
                hint="Set SCRIPTBOARD_LLM_API_KEY or llm_api_key in a config file",
            )

        model = request.model or self.default_model
        url = f"{self.base_url}/models/{model}:generateContent"
        logger.info(
            "Sending Gemini completion request",
            model=model,
            message_count=len(request.messages),
            temperature=request.temperature,
        )

        try:
            response = await self.client.post(
                url,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=self._payload(request),
            )
        except httpx.HTTPError as e:
            logger.error(
                "Gemini completion failed",
                error=str(e),
                error_type=type(e).__name__,
                model=model,
            )
            raise LLMProviderError(
                message=f"Gemini request failed: {e}",
                details={"model": model, "error_type": type(e).__name__},
            ) from e

        if response.status_code != 200:
            error_text = response.text
            logger.error(
                "Gemini API error",
                status_code=response.status_code,
                error_text=error_text[:500],
                model=model,
            )
            raise LLMProviderError(
                message=f"Gemini API error {response.status_code}",
                details={"model": model, "response": error_text[:500]},
            )

        try:
            data: dict[str, Any] = response.json()
            text = self._extract_text(data)
        except (json.JSONDecodeError, AttributeError, TypeError) as e:
            logger.error("Gemini response parsing failed", error=str(e), model=model)
            raise LLMProviderError(
                message=f"Invalid Gemini response: {e}",
                details={"model": model},
            ) from e

        usage = data.get("usageMetadata") or {}
        logger.info(
            "Gemini completion successful",
            model=model,
            response_length=len(text),
        )
        return CompletionResponse(
            id=str(data.get("responseId", "")),
            model=str(data.get("modelVersion", model)),
            choices=[
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": text},
                    "finish_reason": "stop",
                }
            ],
            usage={
                "prompt_tokens": int(usage.get("promptTokenCount", 0)),
                "completion_tokens": int(usage.get("candidatesTokenCount", 0)),
                "total_tokens": int(usage.get("totalTokenCount", 0)),
            },
            provider=self.provider_type,
        )
