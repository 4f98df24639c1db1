"""
Decision engine for closing a negotiation.

WHAT: Turn the final offers into a NegotiationResult
WHY: Multi-seller runs pick a winner; single-seller runs judge who won the haggling
HOW: Two decision strategies sharing one interface, selected by the engine's configuration
"""

from dataclasses import dataclass
from typing import Protocol, Sequence

from ..llm.provider import LLMProvider
from ..llm.fallback import complete_with_fallback
from ..agents.prompts import render_decision_prompt
from ..models.negotiation import NegotiationResult, Offer, Priority, Verdict
from .carbon import (
    compute_order_savings,
    format_carbon_with_context,
    get_carbon_comparison,
    get_industry_average,
)
from .ranking import best_offer, latest_offers, rank_alternatives
from ..utils.formatters import format_carbon, format_delivery, format_price, pluralize_days
from ..utils.logger import get_logger
from ..core.config import settings

logger = get_logger(__name__)

# Final price / budget thresholds
BUYER_WIN_RATIO = 0.85
GOOD_DEAL_RATIO = 0.95
NEAR_BUDGET_RATIO = 1.05
SELLER_EDGE_RATIO = 1.15


@dataclass(frozen=True)
class DecisionContext:
    """Everything a decision strategy may look at once the rounds are over."""
    product: str
    quantity: int
    budget: float
    priority: Priority
    offer_history: Sequence[Offer]
    seller_ids: Sequence[str]
    total_rounds: int
    duration: float


class DecisionStrategy(Protocol):
    async def decide(self, context: DecisionContext) -> NegotiationResult:
        ...


@dataclass(frozen=True)
class BudgetOutcome:
    """Classification of a final price against the buyer's budget."""
    verdict: Verdict
    tier: str
    ratio: float


def classify_budget_outcome(price: float, budget: float, quantity: int) -> BudgetOutcome:
    """
    Classify a final order price against budget x quantity.

    Args:
        price: Final total price for the order
        budget: Per-unit budget
        quantity: Units ordered

    Returns:
        BudgetOutcome with verdict buyer / fair / seller and the tier that produced it
    """
    ratio = (price / quantity) / budget

    if ratio <= BUYER_WIN_RATIO:
        return BudgetOutcome("buyer", "excellent", ratio)
    if ratio <= GOOD_DEAL_RATIO:
        return BudgetOutcome("fair", "good", ratio)
    if ratio <= NEAR_BUDGET_RATIO:
        return BudgetOutcome("fair", "near_budget", ratio)
    if ratio <= SELLER_EDGE_RATIO:
        return BudgetOutcome("seller", "premium", ratio)
    return BudgetOutcome("seller", "held_firm", ratio)


def build_verdict_reasoning(
    outcome: BudgetOutcome,
    offer: Offer,
    budget: float,
    quantity: int,
    priority: Priority
) -> str:
    """Templated rationale citing the final terms for a budget verdict."""
    name = offer.seller_name
    price = format_price(offer.price)
    budget_total = format_price(round(budget * quantity, 2))
    terms = f"{pluralize_days(offer.delivery_days)} delivery and {offer.carbon_footprint:g}kg CO2"
    under = round((1 - outcome.ratio) * 100)
    over = round((outcome.ratio - 1) * 100)

    if outcome.tier == "excellent":
        saved = format_price(round(budget * quantity - offer.price))
        return (
            f"Excellent negotiation! {name} agreed to {price} ({under}% under your budget). "
            f"You saved {saved} with {terms}. {name} made concessions to win your business."
        )
    if outcome.tier == "good":
        return (
            f"Good negotiation! {name} offered {price} ({under}% under budget). "
            f"Fair deal with {terms}. Both parties made reasonable compromises."
        )
    if outcome.tier == "near_budget":
        return (
            f"{name} held firm at {price} (near your {budget_total} budget). "
            f"They maintained their pricing but delivered on {terms}. Market-rate deal."
        )
    if outcome.tier == "premium":
        quality = "certified quality" if offer.certifications else "quality"
        return (
            f"{name} stayed strong at {price} ({over}% over your {budget_total} budget). "
            f"They defended their premium pricing for {terms}. "
            f"Consider if the {quality} justifies the premium."
        )

    if priority == "speed":
        advantage = f"fast {offer.delivery_days}-day delivery"
    elif priority == "carbon":
        advantage = f"low {offer.carbon_footprint:g}kg carbon footprint"
    else:
        advantage = "quality and certifications"
    return (
        f"{name} held firm at {price} ({over}% over budget). They maintained premium pricing, "
        f"betting on their {advantage}. They won this negotiation by not backing down."
    )


def savings_sentence(carbon_saved: float) -> str:
    """Carbon saved against the industry average, framed as miles not driven."""
    comparison = get_carbon_comparison(carbon_saved)
    if not comparison.endswith("!"):
        comparison += "."
    return f"That saves {format_carbon(carbon_saved)} against the industry average. {comparison}"


def fallback_reasoning(priority: Priority, winner: Offer, carbon_saved: float = 0.0) -> str:
    """Priority-keyed rationale used when the reasoning model is unavailable."""
    if priority == "speed":
        return (
            f"{winner.seller_name} won with the fastest delivery time of {format_delivery(winner.delivery_days)}, "
            f"meeting your urgent needs while maintaining reasonable pricing."
        )
    if priority == "carbon":
        certifications = ", ".join(winner.certifications) or "sustainability"
        text = (
            f"{winner.seller_name} won with the lowest carbon footprint at {winner.carbon_footprint:g}kg CO2 "
            f"with verified {certifications} certifications, making it the most sustainable choice."
        )
        if carbon_saved > 0:
            text += " " + savings_sentence(carbon_saved)
        return text
    return (
        f"{winner.seller_name} offered the best value at {format_price(winner.price)}, saving you money "
        f"while meeting delivery requirements and maintaining quality standards."
    )


class RankedDecision:
    """
    Multi-seller decision: best latest offer wins.

    WHAT: Winner, up to two alternatives, carbon savings and a rationale
    WHY: The user sees why one store beat the others on their priority
    HOW: Ranking policy over latest offers + reasoning model with template fallback
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        model: str | None = None,
        fallback_model: str | None = None,
        max_alternatives: int = 2
    ):
        self.provider = provider
        self.model = model or settings.REASONING_MODEL
        self.fallback_model = fallback_model if fallback_model is not None else settings.FALLBACK_MODEL
        self.max_alternatives = max_alternatives

    async def decide(self, context: DecisionContext) -> NegotiationResult:
        final_offers = latest_offers(context.offer_history, context.seller_ids)
        winner = best_offer(final_offers, context.priority)
        alternatives = rank_alternatives(final_offers, winner, context.priority, limit=self.max_alternatives)
        carbon_saved, miles = compute_order_savings(context.product, winner.carbon_footprint, context.quantity)
        per_unit_carbon = round(winner.carbon_footprint / context.quantity, 1)

        reasoning = await complete_with_fallback(
            self.provider,
            render_decision_prompt(
                context.priority,
                winner,
                alternatives,
                carbon_context=format_carbon_with_context(per_unit_carbon, get_industry_average(context.product)),
                savings=savings_sentence(carbon_saved) if carbon_saved > 0 else None,
            ),
            model=self.model,
            fallback_model=self.fallback_model,
            temperature=0.7,
            max_tokens=200,
        )
        if not reasoning:
            logger.warning("Decision rationale fell back to template")
            reasoning = fallback_reasoning(context.priority, winner, carbon_saved)

        logger.info(
            f"Winner {winner.seller_name} for priority={context.priority}: "
            f"price={winner.price}, days={winner.delivery_days}, carbon={winner.carbon_footprint}"
        )
        return NegotiationResult(
            winner=winner,
            reasoning=reasoning,
            carbon_saved=carbon_saved,
            carbon_saved_in_miles=miles,
            alternatives=alternatives,
            total_rounds=context.total_rounds,
            duration=context.duration,
        )


class BudgetVerdictDecision:
    """Single-seller decision: judge the last offer against the budget."""

    async def decide(self, context: DecisionContext) -> NegotiationResult:
        final_offers = latest_offers(context.offer_history, context.seller_ids)
        # Only one seller, so "best" is simply its last offer
        final_offer = best_offer(final_offers, context.priority)
        outcome = classify_budget_outcome(final_offer.price, context.budget, context.quantity)

        logger.info(
            f"Single-seller verdict {outcome.verdict} ({outcome.tier}, ratio={outcome.ratio:.2f}) "
            f"for {final_offer.seller_name}"
        )
        return NegotiationResult(
            winner=final_offer,
            reasoning=build_verdict_reasoning(
                outcome, final_offer, context.budget, context.quantity, context.priority
            ),
            carbon_saved=0.0,
            carbon_saved_in_miles=0,
            alternatives=[],
            total_rounds=context.total_rounds,
            duration=context.duration,
            verdict=outcome.verdict,
        )
