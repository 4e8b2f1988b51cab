"""
Per-call access to the configured LLM provider.

A new provider object is built for every request from ``app.config``, and
the caller always supplies the full conversation, so no conversation
state is shared between users or requests.
"""
from __future__ import annotations

import logging

from flask import current_app

from app.errors import UpstreamError
from app.llm import get_provider
from app.llm.config import get_env_key

logger = logging.getLogger(__name__)


class AIService:
    """Thin wrapper that resolves the provider/model and normalises errors.

    Args:
        app: Flask application instance. If None, uses current_app.
    """

    def __init__(self, app=None):
        self.app = app or current_app._get_current_object()

    def get_llm(self):
        """Get a fresh LLM provider and the model to use.

        Returns:
            Tuple of (provider_instance, model_name).
        """
        cfg = self.app.config
        provider_name = cfg.get('AI_PROVIDER', 'openai')
        api_key = cfg.get(get_env_key(provider_name), '')
        try:
            provider = get_provider(
                provider_name,
                api_key=api_key,
                max_retries=cfg.get('LLM_MAX_RETRIES', 3),
                retry_base_delay=cfg.get('LLM_RETRY_BASE_DELAY', 1.0),
            )
        except ValueError as e:
            raise UpstreamError('AI service is not configured', details=str(e))
        model = cfg.get('AI_MODEL') or provider.default_model
        return provider, model

    def complete(self, messages: list, max_tokens: int = 2000, temperature: float = 0.7) -> str:
        """Return the completion text for *messages*.

        Raises:
            UpstreamError: The provider failed after its rate-limit retries.
        """
        provider, model = self.get_llm()
        try:
            response = provider.complete(
                messages, model=model, max_tokens=max_tokens, temperature=temperature,
            )
        except Exception as e:
            logger.error(f'LLM call failed ({provider.PROVIDER_NAME}/{model}): {e}')
            raise UpstreamError(
                'Failed to get response from the AI service. Please try again.',
                details=str(e),
            )
        logger.info(
            f'LLM {response.provider}/{response.model}: '
            f'{response.input_tokens}+{response.output_tokens} tokens, '
            f'{response.latency_ms}ms'
        )
        return response.content
