"""Remote classification providers.

Both vendors are reduced to one capability, ``classify(prompt) -> str``: send
a single user prompt with a low temperature and return the reply text. Each
adapter owns its request shape and where the text sits in the response.
Adapters do not retry, cache or swallow errors; the categorizer decides what
a failure means.
"""

from __future__ import annotations

from typing import Any, Protocol

from anthropic import Anthropic
from openai import OpenAI

from .config import DEFAULT_TEMPERATURE, CategorizerSettings

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-haiku-latest"
ANTHROPIC_MAX_TOKENS = 256


class ClassificationProvider(Protocol):
    """Anything that can turn a prompt into reply text."""

    name: str

    def classify(self, prompt: str) -> str: ...


def _client_kwargs(api_key: str, timeout: float | None) -> dict[str, Any]:
    # Leave timeout unset rather than None: None disables the SDK default.
    kwargs: dict[str, Any] = {"api_key": api_key}
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs


class OpenAIProvider:
    """Chat Completions adapter (``choices[0].message.content``)."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        *,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or DEFAULT_OPENAI_MODEL
        self.temperature = temperature
        self._client = client if client is not None else OpenAI(**_client_kwargs(api_key, timeout))

    def classify(self, prompt: str) -> str:
        resp = self._client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise ValueError("OpenAI response contained no choices")
        content = getattr(choices[0].message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise ValueError("OpenAI response contained no text content")
        return content


class AnthropicProvider:
    """Messages API adapter (concatenated ``text`` content blocks)."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        *,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float | None = None,
        max_tokens: int = ANTHROPIC_MAX_TOKENS,
        client: Any | None = None,
    ) -> None:
        self.model = model or DEFAULT_ANTHROPIC_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = (
            client if client is not None else Anthropic(**_client_kwargs(api_key, timeout))
        )

    def classify(self, prompt: str) -> str:
        message = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        parts: list[str] = []
        for block in getattr(message, "content", None) or []:
            text = getattr(block, "text", None)
            if getattr(block, "type", "text") == "text" and isinstance(text, str):
                parts.append(text)
        if not parts:
            raise ValueError("Anthropic response contained no text content")
        return "".join(parts)


def create_provider(settings: CategorizerSettings) -> ClassificationProvider | None:
    """Return the adapter selected by ``settings``, or ``None`` for rules only."""

    if settings.provider is None or not settings.api_key:
        return None
    if settings.provider == "anthropic":
        return AnthropicProvider(
            settings.api_key,
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.timeout,
        )
    if settings.provider == "openai":
        return OpenAIProvider(
            settings.api_key,
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.timeout,
        )
    raise ValueError(f"unknown provider: {settings.provider!r}")


__all__ = [
    "ClassificationProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "create_provider",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_MODEL",
]
