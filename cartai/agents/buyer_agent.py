"""
Buyer agent implementation.

WHAT: Agent negotiating on behalf of the shopper
WHY: Represent one optimization priority against every seller
HOW: LLM provider calls with one fallback model, deterministic fallback text otherwise
"""

from dataclasses import dataclass
from typing import Sequence

from ..llm.provider import LLMProvider
from ..llm.fallback import complete_with_fallback
from ..models.negotiation import Offer, Priority
from ..services.ranking import best_offer, latest_offers
from .prompts import render_buyer_counter_prompt, render_buyer_opening_prompt
from ..utils.formatters import format_price
from ..utils.logger import get_logger
from ..core.config import settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuyerStrategy:
    """Constraints and style the buyer negotiates with."""
    primary_goal: str
    max_price: float
    max_days: int
    style: str
    max_carbon: float | None = None


def get_buyer_strategy(priority: Priority, budget: float) -> BuyerStrategy:
    """
    Get buyer strategy for the user's chosen priority.

    Args:
        priority: Optimization priority
        budget: Budget cap for the whole order

    Returns:
        BuyerStrategy with priority-specific slack on the budget
    """
    if priority == "speed":
        # Allow 30% over budget for speed
        return BuyerStrategy("minimize_delivery_time", budget * 1.3, 2, "urgent")
    if priority == "carbon":
        return BuyerStrategy("minimize_carbon", budget * 1.1, 14, "analytical", max_carbon=15)
    return BuyerStrategy("minimize_price", budget, 7, "aggressive")


class BuyerAgent:
    """
    Buyer agent that negotiates on behalf of the shopper.

    WHAT: LLM-backed agent producing the buyer side of the dialogue
    WHY: Push sellers on the single metric the user cares about
    HOW: Prompt rendering + provider call + priority-keyed fallback text
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        model: str | None = None,
        fallback_model: str | None = None,
        total_rounds: int | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None
    ):
        """
        Initialize buyer agent.

        Args:
            provider: LLM provider instance
            model: Backing model label (defaults to settings.BUYER_MODEL)
            fallback_model: Model tried once when the primary fails
            total_rounds: Round count quoted to the model in counter prompts
            temperature: Override default temperature
            max_tokens: Override default max tokens
        """
        self.provider = provider
        self.model = model or settings.BUYER_MODEL
        self.fallback_model = fallback_model if fallback_model is not None else settings.FALLBACK_MODEL
        self.total_rounds = total_rounds or settings.MULTI_SELLER_ROUNDS
        self.temperature = temperature if temperature is not None else settings.LLM_DEFAULT_TEMPERATURE
        self.max_tokens = max_tokens or settings.LLM_DEFAULT_MAX_TOKENS

    async def opening_request(
        self,
        product: str,
        quantity: int,
        priority: Priority,
        strategy: BuyerStrategy,
        buyer_name: str
    ) -> str:
        """
        Produce the first-round request sent to every seller.

        Never raises on provider failure; falls back to a priority-specific request.
        """
        messages = render_buyer_opening_prompt(product, quantity, priority, strategy, buyer_name)
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

        logger.warning(f"Buyer opening request fell back to template (priority={priority})")
        return self.fallback_opening(product, quantity, priority, strategy, buyer_name)

    async def counter(
        self,
        product: str,
        quantity: int,
        priority: Priority,
        strategy: BuyerStrategy,
        offers: Sequence[Offer],
        round_number: int,
        buyer_name: str
    ) -> str:
        """
        Produce a strategic response to the current slate of offers.

        Args:
            offers: Offer history so far (may be empty or hold a single seller)
            round_number: Round the response opens

        Returns:
            Buyer message text
        """
        current = latest_offers(offers)
        if not current:
            logger.debug("Buyer counter with no offers on the table")
            return f"Dear Seller, please share your best terms for {quantity} {product}. Best regards, {buyer_name}"

        best = best_offer(current, priority)
        messages = render_buyer_counter_prompt(
            product, quantity, priority, strategy, current, best,
            round_number, self.total_rounds, buyer_name
        )
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

        logger.warning(f"Buyer counter fell back to template (round={round_number}, priority={priority})")
        return self.fallback_counter(priority, best)

    @staticmethod
    def fallback_opening(
        product: str,
        quantity: int,
        priority: Priority,
        strategy: BuyerStrategy,
        buyer_name: str
    ) -> str:
        if priority == "speed":
            return (
                f"Dear Seller, I am seeking {quantity} {product} with the fastest possible delivery "
                f"(ideally 1-2 days). Budget is flexible for speed. Please confirm availability and "
                f"your earliest delivery date. Best regards, {buyer_name}"
            )
        if priority == "carbon":
            return (
                f"Dear Seller, Seeking {quantity} {product} with the lowest carbon footprint. "
                f"Must have verified sustainability certifications. Willing to wait for eco-friendly "
                f"options. Best regards, {buyer_name}"
            )
        return (
            f"Dear Seller, I need {quantity} {product} at the best possible price, within a budget of "
            f"{format_price(strategy.max_price)}. Must deliver within {strategy.max_days} days. "
            f"Best regards, {buyer_name}"
        )

    @staticmethod
    def fallback_counter(priority: Priority, best: Offer) -> str:
        if priority == "speed" and best.delivery_days > 1:
            return f"@{best.seller_name} - Can you deliver faster than {best.delivery_days} days? We need this urgently."
        if priority == "carbon":
            return (
                f"@{best.seller_name} - Your carbon footprint looks good. "
                f"Can you provide a detailed breakdown and certifications?"
            )
        return f"@{best.seller_name} - Competitive price, but can you go lower? We're comparing multiple suppliers."
