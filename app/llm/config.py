"""
Model configuration for all supported LLM providers.

Prices are per million tokens in USD.
"""
from __future__ import annotations

MODEL_CONFIG = {
    "openai": {
        "env_key": "OPENAI_API_KEY",
        "models": {
            "gpt-4.1-mini": {
                "input_price": 0.40,
                "output_price": 1.60,
                "tier": "basic",
            },
            "gpt-5.2": {
                "input_price": 1.75,
                "output_price": 14.0,
                "tier": "advanced",
            },
        }
    },
    "claude": {
        "env_key": "ANTHROPIC_API_KEY",
        "models": {
            "claude-haiku-4-5": {
                "input_price": 1.0,
                "output_price": 5.0,
                "tier": "basic",
            },
            "claude-opus-4-6": {
                "input_price": 5.0,
                "output_price": 25.0,
                "tier": "advanced",
            },
        }
    },
    "zhipu": {
        "env_key": "ZHIPU_API_KEY",
        "models": {
            "glm-5": {
                "input_price": 1.0,
                "output_price": 3.2,
                "tier": "basic",
            },
        }
    },
}


def get_model_pricing(provider: str, model: str) -> dict | None:
    """Look up pricing for a specific provider/model combination.

    Returns:
        Dict with 'input_price', 'output_price', and 'tier', or None if not found.
    """
    provider_config = MODEL_CONFIG.get(provider, {})
    return provider_config.get("models", {}).get(model)


def get_env_key(provider: str) -> str:
    """Return the config key holding the API key for *provider*."""
    return MODEL_CONFIG.get(provider, {}).get("env_key", "")


def get_default_model(provider: str, tier: str = "basic") -> str | None:
    """Return the first model of *tier* for *provider*, if any."""
    models = MODEL_CONFIG.get(provider, {}).get("models", {})
    for name, info in models.items():
        if info.get("tier") == tier:
            return name
    return None


def estimate_cost(provider: str, model: str, input_tokens: int, output_tokens: int) -> float:
    """Estimate the USD cost of a call from the pricing table."""
    pricing = get_model_pricing(provider, model)
    if not pricing:
        return 0.0
    input_cost = (input_tokens / 1_000_000) * pricing["input_price"]
    output_cost = (output_tokens / 1_000_000) * pricing["output_price"]
    return round(input_cost + output_cost, 6)
