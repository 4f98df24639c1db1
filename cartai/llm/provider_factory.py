"""
LLM provider factory with singleton pattern.

WHAT: Factory to get the shared LLM provider used by buyer, seller and decision agents
WHY: Every agent in a run should share one HTTP connection pool
HOW: Read LLM_PROVIDER from config, cache singleton, close its client on shutdown
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .provider import LLMProvider

SUPPORTED_PROVIDERS = ("openrouter",)

# Singleton instance
_provider_instance: "LLMProvider | None" = None


def get_provider() -> "LLMProvider":
    """
    Get the configured LLM provider singleton.

    Returns:
        LLMProvider instance based on settings.LLM_PROVIDER

    Raises:
        ValueError: If provider name is unknown
    """
    global _provider_instance

    if _provider_instance is None:
        # Import here to avoid circular dependencies
        from ..core.config import settings
        from ..utils.logger import get_logger

        logger = get_logger(__name__)
        provider_name = settings.LLM_PROVIDER

        if provider_name == "openrouter":
            from .openrouter import OpenRouterProvider
            _provider_instance = OpenRouterProvider()
        else:
            raise ValueError(
                f"Unknown LLM provider: {provider_name} (supported: {', '.join(SUPPORTED_PROVIDERS)})"
            )

        mode = "live" if settings.LLM_ENABLE_OPENROUTER else "template fallbacks only"
        logger.info(f"LLM provider initialized: {provider_name} ({mode})")

    return _provider_instance


async def close_provider() -> None:
    """Close the cached provider's HTTP client, then drop the singleton."""
    global _provider_instance
    provider, _provider_instance = _provider_instance, None
    close = getattr(provider, "close", None)
    if close is not None:
        await close()


def reset_provider() -> None:
    """Reset the provider singleton (useful for testing)."""
    global _provider_instance
    _provider_instance = None
