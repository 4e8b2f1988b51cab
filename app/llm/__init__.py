"""
LLM provider registry.

Each ``*_provider`` module in this package registers one backend class
(OpenAI, Claude, Zhipu).  Callers ask for a provider by the name set in
``AI_PROVIDER`` and get a new instance per request.
"""

import importlib
import logging
import os
import pkgutil

logger = logging.getLogger(__name__)

_providers = {}

_NON_PROVIDER_MODULES = ("base", "config")


def register_provider(cls):
    """Class decorator: make *cls* available under its PROVIDER_NAME."""
    _providers[cls.PROVIDER_NAME] = cls
    return cls


def get_provider(name: str, api_key: str = None, **kwargs):
    """Build a new provider instance.

    Args:
        name: Registered provider name ('openai', 'claude', 'zhipu').
        api_key: API key for the backend.
        **kwargs: Retry settings forwarded to the constructor.

    Raises:
        ValueError: No provider is registered under *name*.
    """
    cls = _providers.get(name)
    if cls is None:
        raise ValueError(
            f"Unknown LLM provider: {name}. Available: {sorted(_providers)}"
        )
    return cls(api_key=api_key, **kwargs)


def get_available_providers():
    return dict(_providers)


def discover_providers():
    """Import every provider module so its @register_provider runs.

    A module whose SDK fails to import is logged and skipped.
    """
    pkg_dir = os.path.dirname(__file__)
    for _, mod_name, _ in pkgutil.iter_modules([pkg_dir]):
        if mod_name in _NON_PROVIDER_MODULES:
            continue
        try:
            importlib.import_module(f".{mod_name}", package=__name__)
        except Exception as e:
            logger.warning(f"Failed to load LLM provider {mod_name}: {e}")


discover_providers()
