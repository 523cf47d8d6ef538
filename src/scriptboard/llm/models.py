"""Data models for LLM integration."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import TypedDict


class LLMProvider(str, Enum):
    """Available LLM providers."""

    GEMINI = "gemini"
    OPENAI_COMPATIBLE = "openai_compatible"


# TypedDict definitions for structured data
class CompletionMessage(TypedDict):
    """Message in completion choice."""

    role: str
    content: Any  # Can be str, int, None - converted to str in the property


class CompletionChoice(TypedDict):
    """Choice in completion response."""

    index: int
    message: CompletionMessage
    finish_reason: str


class UsageInfo(TypedDict, total=False):
    """Token usage information."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


def _default_usage_info() -> UsageInfo:
    """Create default empty UsageInfo."""
    return UsageInfo()


class CompletionRequest(BaseModel):
    """Request for text completion."""

    model: str
    messages: list[dict[str, str]]
    temperature: float = 0.7
    max_tokens: int | None = None
    top_p: float = 1.0
    system: str | None = None

    @classmethod
    def from_prompt(
        cls, prompt: str, model: str, **kwargs: Any
    ) -> "CompletionRequest":
        """Build a single-turn request from a user prompt."""
        return cls(
            model=model, messages=[{"role": "user", "content": prompt}], **kwargs
        )


class CompletionResponse(BaseModel):
    """Response from text completion."""

    id: str
    model: str
    choices: list[CompletionChoice]
    usage: UsageInfo = Field(default_factory=_default_usage_info)
    provider: LLMProvider

    @property
    def content(self) -> str:
        """Get the content from the first choice message.

        Returns:
            The content text from the first choice's message, or an empty
            string when the provider returned no choices.
        """
        if not self.choices:
            return ""
        content = self.choices[0]["message"]["content"]
        return "" if content is None else str(content)
