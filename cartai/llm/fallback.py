"""
Completion with a single fallback model.

WHAT: Call the provider once with the primary model, once with a fallback model
WHY: Agent text calls must never fail a negotiation run
HOW: Catch ProviderError, treat empty content as failure, return None when both fail
"""

from .provider import LLMProvider
from .types import ChatMessage, ModelRef, ProviderError
from ..utils.text import clean_agent_text
from ..utils.logger import get_logger

logger = get_logger(__name__)


async def complete_with_fallback(
    provider: LLMProvider,
    messages: list[ChatMessage],
    *,
    model: ModelRef | None,
    fallback_model: ModelRef | None = None,
    temperature: float,
    max_tokens: int,
) -> str | None:
    """
    Generate text, retrying once on a fallback model.

    Args:
        provider: Backing LLM provider
        messages: Prompt messages
        model: Primary model label
        fallback_model: Model tried once if the primary fails (skipped if equal)
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate

    Returns:
        Cleaned response text, or None if every attempt failed or came back empty
    """
    candidates = [model]
    if fallback_model and fallback_model != model:
        candidates.append(fallback_model)

    for candidate in candidates:
        try:
            result = await provider.generate(
                messages,
                temperature=temperature,
                max_tokens=max_tokens,
                model=candidate,
            )
        except ProviderError as e:
            logger.warning(f"Model {candidate} failed: {e}")
            continue

        text = clean_agent_text(result.text)
        if text:
            return text

        logger.warning(f"Model {candidate} returned empty content")

    return None
