"""
OpenAI LLM provider.

Supports GPT-4.1-mini and GPT-5.2 models via the official openai Python SDK.
"""
from __future__ import annotations

import logging
import time

import openai

from . import register_provider
from .base import BaseLLMProvider, LLMResponse

logger = logging.getLogger(__name__)


@register_provider
class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT LLM provider."""

    PROVIDER_NAME = "openai"

    def __init__(self, api_key: str = None, **kwargs):
        super().__init__(api_key=api_key, **kwargs)
        self._client = None

    def _ensure_client(self):
        """Lazily initialize the client if not yet created."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("OpenAI API key is required.")
            self._client = openai.OpenAI(api_key=self.api_key, timeout=120.0, max_retries=0)
        return self._client

    def chat(
        self,
        messages: list,
        model: str = None,
        max_tokens: int = 4096,
        temperature: float = 0,
    ) -> LLMResponse:
        """Send a chat completion request to OpenAI.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
                      Supports 'system', 'user', and 'assistant' roles.
            model: Model identifier. Defaults to gpt-4.1-mini.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature (0 = deterministic).
        """
        client = self._ensure_client()
        model = model or self.default_model

        start_time = time.time()
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency_ms = int((time.time() - start_time) * 1000)

        choice = response.choices[0]
        content = choice.message.content or ""

        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0

        return LLMResponse(
            content=content,
            model=model,
            provider=self.PROVIDER_NAME,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost=self.estimate_cost(input_tokens, output_tokens, model),
            latency_ms=latency_ms,
            finish_reason=choice.finish_reason or "",
        )
