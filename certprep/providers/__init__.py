"""LLM provider integrations."""

import logging
from typing import Dict, List, Optional, Type

from ..config import Settings
from .base import BaseLLMProvider, LLMProviderError, ProviderRequest
from .gemini_provider import GeminiProvider
from .moonshot_provider import MoonshotProvider
from .openrouter_provider import OpenRouterProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: Dict[str, Type[BaseLLMProvider]] = {
    "gemini": GeminiProvider,
    "deepseek": OpenRouterProvider,
    "moonshot": MoonshotProvider,
}


def build_provider(name: str, settings: Settings) -> BaseLLMProvider:
    """Instantiate one provider from settings.

    Raises:
        ValueError: If ``name`` is not a known provider
    """
    if name not in PROVIDER_CLASSES:
        raise ValueError(
            f"Unknown provider '{name}'. Available: {list(PROVIDER_CLASSES.keys())}"
        )

    if name == "gemini":
        return GeminiProvider(
            api_key=settings.gemini_api_key, model=settings.gemini_model_name
        )
    if name == "deepseek":
        return OpenRouterProvider(
            api_key=settings.deepseek_api_key,
            model=settings.deepseek_model_name,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
        )
    return MoonshotProvider(
        api_key=settings.moonshot_api_key, model=settings.moonshot_model_name
    )


def build_providers(
    settings: Settings, priority: Optional[List[str]] = None
) -> List[BaseLLMProvider]:
    """Instantiate providers in priority order.

    Providers without credentials are still returned; the failover layer
    reports and skips them.

    Args:
        settings: Application settings holding keys and model names
        priority: Provider names in priority order (settings order if omitted)

    Returns:
        Providers in the order they should be tried
    """
    names = priority if priority is not None else settings.get_provider_priority()
    providers = [build_provider(name, settings) for name in names]
    configured = [p.name for p in providers if p.has_credential]
    logger.info(
        f"Provider priority: {' -> '.join(names)} (configured: {configured or 'none'})"
    )
    return providers


__all__ = [
    "BaseLLMProvider",
    "GeminiProvider",
    "LLMProviderError",
    "MoonshotProvider",
    "OpenRouterProvider",
    "PROVIDER_CLASSES",
    "ProviderRequest",
    "build_provider",
    "build_providers",
]
