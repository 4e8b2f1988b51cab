"""
Base classes for LLM providers.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .config import estimate_cost, get_default_model

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider."""

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0
    latency_ms: int = 0
    finish_reason: str = ""


def is_rate_limited(exc: Exception) -> bool:
    """True when *exc* is an HTTP 429 from any of the provider SDKs."""
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(getattr(exc, "response", None), "status_code", None)
    return status == 429


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Instances are cheap and stateless apart from the SDK client: the whole
    conversation is passed to every ``chat`` call.

    Args:
        api_key: Provider API key.
        max_retries: Total attempts made by ``complete`` on rate limits.
        retry_base_delay: First backoff delay in seconds, doubled each retry.
    """

    PROVIDER_NAME: str = ""

    def __init__(self, api_key: str = None, max_retries: int = 3, retry_base_delay: float = 1.0):
        self.api_key = api_key
        self.max_retries = max(1, max_retries)
        self.retry_base_delay = retry_base_delay

    @property
    def default_model(self) -> str | None:
        return get_default_model(self.PROVIDER_NAME)

    @abstractmethod
    def chat(
        self,
        messages: list,
        model: str = None,
        max_tokens: int = 4096,
        temperature: float = 0,
    ) -> LLMResponse:
        """Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model identifier. If None, uses provider default.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature (0 = deterministic).

        Returns:
            LLMResponse with the completion result and metadata.
        """
        ...

    def complete(self, messages: list, **kwargs) -> LLMResponse:
        """``chat`` with exponential backoff on rate-limit responses.

        Other errors propagate immediately.
        """
        delay = self.retry_base_delay
        for attempt in range(1, self.max_retries + 1):
            try:
                return self.chat(messages, **kwargs)
            except Exception as e:
                if not is_rate_limited(e) or attempt == self.max_retries:
                    raise
                logger.warning(
                    f"{self.PROVIDER_NAME} rate limited "
                    f"(attempt {attempt}/{self.max_retries}), retrying in {delay}s"
                )
                time.sleep(delay)
                delay *= 2

    def estimate_cost(self, input_tokens: int, output_tokens: int, model: str) -> float:
        """Estimate the cost in USD for the given token counts."""
        return estimate_cost(self.PROVIDER_NAME, model, input_tokens, output_tokens)
