"""
Provider variant table.

WHAT: Built-in backing-model configurations that can be compared side by side
WHY: Each provider tab shows how a different model mix negotiates the same request
HOW: Static ProviderVariant values looked up by id
"""

from ..models.negotiation import ProviderVariant
from ..utils.exceptions import UnknownProviderVariantException


PROVIDER_VARIANTS: dict[str, ProviderVariant] = {
    "openrouter": ProviderVariant(
        variant_id="openrouter",
        name="OpenAI GPT",
        description="GPT-4o-mini buyer with mixed sellers",
        buyer_model="openai/gpt-4o-mini",
        seller_models={
            "premium": "openai/gpt-4o",
            "mid": "openrouter/sherlock-think-alpha",
            "budget": "anthropic/claude-3.5-sonnet",
        },
    ),
    "anthropic": ProviderVariant(
        variant_id="anthropic",
        name="Anthropic Claude",
        description="Claude Haiku buyer with Sherlock + GPT sellers",
        buyer_model="anthropic/claude-3-haiku",
        seller_models={
            "premium": "openai/gpt-4o",
            "mid": "openrouter/sherlock-think-alpha",
            "budget": "anthropic/claude-3.5-sonnet",
        },
        price_multiplier=0.97,
        carbon_multiplier=0.92,
        delivery_shift=1,
    ),
    "gemini": ProviderVariant(
        variant_id="gemini",
        name="Sherlock",
        description="Sherlock reasoner buyer with mixed sellers",
        buyer_model="openrouter/sherlock-think-alpha",
        seller_models={
            "premium": "openai/gpt-4o",
            "mid": "openrouter/sherlock-think-alpha",
            "budget": "anthropic/claude-3.5-sonnet",
        },
        price_multiplier=1.03,
        carbon_multiplier=1.05,
        delivery_shift=-1,
    ),
}


def get_provider_variant(variant_id: str) -> ProviderVariant:
    """
    Look up a provider variant.

    Raises:
        UnknownProviderVariantException: If the id is not in the table
    """
    variant = PROVIDER_VARIANTS.get(variant_id)
    if variant is None:
        raise UnknownProviderVariantException(variant_id, sorted(PROVIDER_VARIANTS))
    return variant
