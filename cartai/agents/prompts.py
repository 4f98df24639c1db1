"""
Prompt templates for buyer, seller and decision agents.

WHAT: Persona prompts and rendering helpers for every text-producing agent call
WHY: Consistent tone and constraints across negotiations
HOW: Template strings with context injection, return ChatMessage lists
"""

from typing import TYPE_CHECKING, List, Sequence

from ..llm.types import ChatMessage
from ..models.negotiation import Offer, Priority, SellerProfile
from ..utils.formatters import format_delivery, format_price

if TYPE_CHECKING:
    from .buyer_agent import BuyerStrategy


PRIORITY_DESCRIPTIONS: dict[str, str] = {
    "speed": "fastest possible delivery",
    "carbon": "lowest environmental impact with verified sustainability",
    "price": "best price while maintaining quality",
}

_NO_REASONING = (
    "Do NOT reveal your chain-of-thought. NEVER output <think> tags. "
    "Respond ONLY with the message itself."
)


def describe_offer(offer: Offer) -> str:
    certifications = ", ".join(offer.certifications) or "No certs"
    return (
        f"{offer.seller_name}: {format_price(offer.price)}, {offer.carbon_footprint:g}kg CO2, "
        f"{offer.delivery_days} days, [{certifications}]"
    )


def render_buyer_opening_prompt(
    product: str,
    quantity: int,
    priority: Priority,
    strategy: "BuyerStrategy",
    buyer_name: str,
) -> List[ChatMessage]:
    """
    Render the buyer's first-round request to all sellers.

    WHAT: Opening request stating product, quantity and the single priority
    WHY: Sellers react to the stated priority and urgency
    HOW: System persona + user task with hard word limit
    """
    carbon_line = f"Target carbon: Under {strategy.max_carbon:g}kg CO2\n" if strategy.max_carbon else ""

    system_prompt = f"You are a professional buyer agent representing {buyer_name}. {_NO_REASONING}"
    user_prompt = f"""Product needed: {quantity} {product}
Primary priority: {PRIORITY_DESCRIPTIONS[priority]}
Budget: {format_price(strategy.max_price)}
{carbon_line}Max delivery time: {strategy.max_days} days

Write a clear, professional opening request to sellers (2-3 sentences).
Start with "Dear Seller," and sign off with "Best regards, {buyer_name}".
Emphasize your priority ({priority}) and be specific about requirements.
Keep it under 60 words total."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def render_buyer_counter_prompt(
    product: str,
    quantity: int,
    priority: Priority,
    strategy: "BuyerStrategy",
    offers: Sequence[Offer],
    best: Offer,
    round_number: int,
    total_rounds: int,
    buyer_name: str,
) -> List[ChatMessage]:
    """Render the buyer's strategic response to the current slate of offers."""
    offers_text = "\n".join(describe_offer(offer) for offer in offers)

    system_prompt = f"You are a strategic buyer agent representing {buyer_name}. {_NO_REASONING}"
    user_prompt = f"""Round {round_number}/{total_rounds} of negotiation.

Your priority: {priority}
Your constraints: max price {format_price(strategy.max_price)}, max {strategy.max_days} days delivery
Product: {quantity} {product}

Current offers:
{offers_text}

Current best offer (by your priority): {best.seller_name}

Task: Respond strategically to push for better terms on your PRIMARY goal ({priority.upper()}).
- Reference specific sellers and their offers using @SellerName
- Be persuasive but professional
- Keep under 50 words"""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def render_seller_prompt(
    profile: SellerProfile,
    product: str,
    quantity: int,
    buyer_message: str,
    offer: Offer,
    buyer_name: str,
) -> List[ChatMessage]:
    """
    Render a seller's reply accompanying its offer.

    WHAT: In-character reply that presents the already computed terms
    WHY: The numbers come from the offer policy; the model only phrases them
    HOW: Persona with personality and tactics, offer terms, buyer's last message
    """
    personality = profile.personality
    tactics = "\n".join(f"- {tactic}" for tactic in profile.tactics) or "- Be helpful"
    certifications = ", ".join(offer.certifications) or "None"

    system_prompt = f"""You are {profile.display_name}, a seller with these characteristics:
- Sustainability focus: {personality.sustainability_focus}
- Price point: {personality.price_point}
- Negotiation flexibility: {personality.negotiation_flexibility}

Your tactics:
{tactics}

{_NO_REASONING}"""

    user_prompt = f"""Your current offer: {format_price(offer.price)} total, {offer.carbon_footprint:g}kg CO2, {offer.delivery_days} days delivery
Your certifications: {certifications}

Product: {quantity} {product}

Buyer ({buyer_name}) said: "{buyer_message}"

Respond as this seller in 1-2 sentences. Address the buyer by their name "{buyer_name}".
Be strategic, stay in character, and highlight your strengths. Do not change the offer terms.
Keep it under 50 words. Be persuasive but not pushy."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def render_decision_prompt(
    priority: Priority,
    winner: Offer,
    alternatives: Sequence[Offer],
    *,
    carbon_context: str | None = None,
    savings: str | None = None,
) -> List[ChatMessage]:
    """
    Render the explanation of why the winning offer won.

    Args:
        priority: User's optimization priority
        winner: Winning offer
        alternatives: Runner-up offers
        carbon_context: Per-unit footprint compared with the industry average
        savings: Sentence describing carbon saved against the average
    """
    certifications = ", ".join(winner.certifications) or "None"
    alternatives_text = "\n".join(describe_offer(offer) for offer in alternatives) or "None"
    carbon_lines = ""
    if carbon_context:
        carbon_lines += f"- Per unit: {carbon_context}\n"
    if savings:
        carbon_lines += f"- Impact: {savings}\n"

    user_prompt = f"""You are explaining a purchasing decision to a user who prioritized "{priority}".

Winning offer: {winner.seller_name}
- Price: {format_price(winner.price)}
- Carbon: {winner.carbon_footprint:g}kg CO2
{carbon_lines}- Delivery: {format_delivery(winner.delivery_days)}
- Certifications: {certifications}

Alternatives considered:
{alternatives_text}

Explain in 2-3 sentences why {winner.seller_name} won based on the "{priority}" priority.
Be specific about trade-offs. Keep it under 80 words."""

    return [
        {"role": "system", "content": f"You are a concise shopping advisor. {_NO_REASONING}"},
        {"role": "user", "content": user_prompt},
    ]
