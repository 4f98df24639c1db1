"""
Seller agent implementation.

WHAT: Seller that computes offers and phrases them in character
WHY: Core seller behavior for negotiation rounds
HOW: Deterministic offer policy for terms, LLM provider for the reply text
"""

import random

from ..llm.provider import LLMProvider
from ..llm.fallback import complete_with_fallback
from ..models.negotiation import Offer, Priority, ProviderVariant, SellerProfile
from .offer_policy import MULTI_SELLER_POLICY, RandomSource, SellerPolicyConfig, generate_offer
from .prompts import render_seller_prompt
from ..utils.formatters import format_price, pluralize_days
from ..utils.logger import get_logger
from ..core.config import settings

logger = get_logger(__name__)


class SellerAgent:
    """Seller agent that generates offers and replies."""

    def __init__(
        self,
        profile: SellerProfile,
        provider: LLMProvider,
        *,
        model: str | None = None,
        fallback_model: str | None = None,
        policy: SellerPolicyConfig = MULTI_SELLER_POLICY,
        rng: RandomSource | None = None,
        variant: ProviderVariant | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None
    ):
        """
        Initialize seller agent.

        Args:
            profile: Seller profile with base terms and personality
            provider: LLM provider instance
            model: Explicit model label; otherwise the variant's model for the
                seller's price tier, otherwise the profile's model
            fallback_model: Model tried once when the primary fails
            policy: Floor and jitter bounds for the offer policy
            rng: Random source for the offer policy (unseeded by default)
            variant: Provider-variant multipliers
            temperature: LLM temperature
            max_tokens: Maximum tokens to generate
        """
        self.profile = profile
        self.provider = provider
        self.policy = policy
        self.rng = rng or random.Random()
        self.variant = variant
        self.model = model or self._variant_model() or profile.model
        self.fallback_model = fallback_model if fallback_model is not None else settings.FALLBACK_MODEL
        self.temperature = temperature if temperature is not None else settings.LLM_DEFAULT_TEMPERATURE
        self.max_tokens = max_tokens or settings.LLM_DEFAULT_MAX_TOKENS

    @property
    def seller_id(self) -> str:
        return self.profile.seller_id

    def _variant_model(self) -> str | None:
        if self.variant is None:
            return None
        return self.variant.seller_models.get(self.profile.personality.price_point)

    def make_offer(
        self,
        *,
        quantity: int,
        round_number: int,
        buyer_message: str,
        priority: Priority
    ) -> Offer:
        """Compute this round's terms; local arithmetic, no model call."""
        offer = generate_offer(
            self.profile,
            quantity=quantity,
            round_number=round_number,
            buyer_message=buyer_message,
            priority=priority,
            rng=self.rng,
            policy=self.policy,
            variant=self.variant,
        )
        logger.debug(
            f"Seller {self.profile.display_name} round {round_number}: "
            f"price={offer.price}, days={offer.delivery_days}, carbon={offer.carbon_footprint}"
        )
        return offer

    async def reply(
        self,
        *,
        product: str,
        quantity: int,
        buyer_message: str,
        offer: Offer,
        buyer_name: str
    ) -> str:
        """
        Generate the seller's message accompanying an offer.

        WHAT: In-character reply presenting the offer
        WHY: Buyer and user see dialogue, not just numbers
        HOW: Render prompt, call provider, fall back to a profile-specific template
        """
        messages = render_seller_prompt(self.profile, product, quantity, buyer_message, offer, buyer_name)
        text = await complete_with_fallback(
            self.provider,
            messages,
            model=self.model,
            fallback_model=self.fallback_model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if text:
            return text

        logger.warning(f"Seller {self.profile.display_name} reply fell back to template")
        return self.fallback_reply(product, quantity, offer, buyer_name)

    def fallback_reply(self, product: str, quantity: int, offer: Offer, buyer_name: str) -> str:
        personality = self.profile.personality
        price = format_price(offer.price)

        if personality.sustainability_focus == "very_high":
            certifications = " & ".join(offer.certifications) or "verified sustainability"
            return f"Dear {buyer_name}, we offer premium sustainable {product} with {certifications} certifications at {price}."
        if personality.price_point == "budget":
            return (
                f"Dear {buyer_name}, best price in the market - {price} for {quantity} units. "
                f"Ready to ship in {pluralize_days(offer.delivery_days)}!"
            )
        return f"Dear {buyer_name}, we can deliver {quantity} {product} in {pluralize_days(offer.delivery_days)} for {price}."
