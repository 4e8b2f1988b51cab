"""
Zhipu AI (GLM) LLM provider.

Supports GLM-5 model via the official zhipuai Python SDK.
"""
from __future__ import annotations

import logging
import time

from zhipuai import ZhipuAI

from . import register_provider
from .base import BaseLLMProvider, LLMResponse

logger = logging.getLogger(__name__)


@register_provider
class ZhipuProvider(BaseLLMProvider):
    """Zhipu AI (GLM) LLM provider."""

    PROVIDER_NAME = "zhipu"

    def __init__(self, api_key: str = None, **kwargs):
        super().__init__(api_key=api_key, **kwargs)
        self._client = None

    def _ensure_client(self):
        """Lazily initialize the client if not yet created."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("Zhipu API key is required.")
            self._client = ZhipuAI(api_key=self.api_key)
        return self._client

    def chat(
        self,
        messages: list,
        model: str = None,
        max_tokens: int = 4096,
        temperature: float = 0,
    ) -> LLMResponse:
        """Send a chat completion request to Zhipu GLM.

        Zhipu requires temperature > 0, so 0 is remapped to 0.01.
        """
        client = self._ensure_client()
        model = model or self.default_model

        if temperature <= 0:
            temperature = 0.01

        start_time = time.time()
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency_ms = int((time.time() - start_time) * 1000)

        # Reasoning models may leave content empty and answer in reasoning_content
        choice = response.choices[0]
        content = choice.message.content or ""
        reasoning = getattr(choice.message, 'reasoning_content', None) or ""
        if not content and reasoning:
            logger.info(f"Zhipu: content empty, using reasoning_content ({len(reasoning)} chars)")
            content = reasoning

        if not content or choice.finish_reason != "stop":
            logger.warning(
                f"Zhipu unexpected response: finish_reason={choice.finish_reason}, "
                f"content_len={len(content)}, model={model}"
            )

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
