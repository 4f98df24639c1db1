"""LLM provider layer."""

from .types import (
    ChatMessage,
    ModelRef,
    LLMResult,
    ProviderStatus,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderDisabledError,
    ProviderResponseError,
)
from .provider import LLMProvider
from .provider_factory import close_provider, get_provider, reset_provider
from .fallback import complete_with_fallback

__all__ = [
    "ChatMessage",
    "ModelRef",
    "LLMResult",
    "ProviderStatus",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderUnavailableError",
    "ProviderDisabledError",
    "ProviderResponseError",
    "LLMProvider",
    "get_provider",
    "reset_provider",
    "close_provider",
    "complete_with_fallback",
]
