"""
Seller offer-generation policy.

WHAT: Numeric simulation of how a seller moves price, delivery and carbon each round
WHY: Offers are the negotiation dynamics; they must not depend on a model call
HOW: Concession tiers, stubbornness buckets and jitter drawn from an injectable random source
"""

import math
from dataclasses import dataclass
from typing import Protocol

from ..models.negotiation import Offer, Priority, ProviderVariant, SellerProfile


class RandomSource(Protocol):
    """Subset of random.Random used by the policy."""

    def random(self) -> float:
        ...

    def uniform(self, a: float, b: float) -> float:
        ...


# Nominal per-round price concession by negotiation flexibility
CONCESSION_RATES: dict[str, float] = {
    "very_high": 0.08,
    "high": 0.06,
    "medium": 0.04,
    "low": 0.02,
}

# Stubbornness roll -> share of the nominal concession applied
FIRM_ROLL, PARTIAL_ROLL = 0.3, 0.6
FIRM_SHARE, PARTIAL_SHARE = 0.3, 0.7

# Early rounds: a low roll makes the seller test the buyer with a higher price
PRICE_TEST_ROUNDS = 2
PRICE_TEST_ROLL = 0.15
PRICE_TEST_MAX_INCREASE = 0.05

URGENCY_KEYWORDS = ("urgent", "fast")
URGENCY_ACCEPT_CHANCE = 0.7
URGENCY_DAYS_CUT = 2

# Speed priority: more flexible sellers shorten delivery more often
SPEED_SHORTEN_CHANCE: dict[str, float] = {
    "very_high": 0.6,
    "high": 0.5,
    "medium": 0.4,
    "low": 0.25,
}
SPEED_LENGTHEN_CHANCE = 0.05

# Carbon priority: sustainability-focused sellers cut harder
CARBON_SPECIALIZATION: dict[str, float] = {
    "very_high": 0.85,
    "high": 0.9,
    "medium": 0.95,
    "low": 1.0,
}

MIN_ORDER_CARBON = 1.0


@dataclass(frozen=True)
class SellerPolicyConfig:
    """Bounds that differ between negotiation modes."""

    price_floor: float = 0.80
    price_jitter: float = 0.03
    carbon_jitter: float = 0.04


MULTI_SELLER_POLICY = SellerPolicyConfig(price_floor=0.80, price_jitter=0.03, carbon_jitter=0.04)
SINGLE_SELLER_POLICY = SellerPolicyConfig(price_floor=0.75, price_jitter=0.06, carbon_jitter=0.06)


def mentions_urgency(message: str) -> bool:
    lower = message.lower()
    return any(keyword in lower for keyword in URGENCY_KEYWORDS)


def price_factor(flexibility: str, round_number: int, rng: RandomSource) -> float:
    """
    Multiplier on base price for this round, before floor and jitter.

    Args:
        flexibility: Seller's negotiation flexibility tier
        round_number: 1-based round
        rng: Random source

    Returns:
        Factor below 1.0 for a concession, above 1.0 for a price test
    """
    rate = CONCESSION_RATES[flexibility]
    roll = rng.random()

    if round_number <= PRICE_TEST_ROUNDS and roll < PRICE_TEST_ROLL:
        return 1.0 + rng.uniform(0.0, PRICE_TEST_MAX_INCREASE)

    if roll < FIRM_ROLL:
        share = FIRM_SHARE
    elif roll < PARTIAL_ROLL:
        share = PARTIAL_SHARE
    else:
        share = 1.0

    return 1.0 - round_number * rate * share


def compute_total_price(
    profile: SellerProfile,
    *,
    quantity: int,
    round_number: int,
    rng: RandomSource,
    policy: SellerPolicyConfig,
    variant: ProviderVariant | None = None,
) -> int:
    """Order total in whole currency units, never below the per-unit floor."""
    base = profile.inventory.base_price
    multiplier = variant.price_multiplier if variant else 1.0

    unit = base * price_factor(profile.personality.negotiation_flexibility, round_number, rng)
    unit *= multiplier * (1.0 + rng.uniform(-policy.price_jitter, policy.price_jitter))

    floor_total = base * policy.price_floor * quantity
    # ceil keeps integer rounding from dipping under the floor
    return max(round(unit * quantity), math.ceil(floor_total - 1e-9))


def compute_delivery_days(
    profile: SellerProfile,
    *,
    buyer_message: str,
    priority: Priority,
    rng: RandomSource,
    variant: ProviderVariant | None = None,
) -> int:
    """Delivery lead time in whole days, at least 1."""
    days = profile.inventory.delivery_days + (variant.delivery_shift if variant else 0)

    if mentions_urgency(buyer_message) and rng.random() < URGENCY_ACCEPT_CHANCE:
        days -= URGENCY_DAYS_CUT

    if priority == "speed":
        roll = rng.random()
        if roll < SPEED_SHORTEN_CHANCE[profile.personality.negotiation_flexibility]:
            days -= 1
        elif roll >= 1.0 - SPEED_LENGTHEN_CHANCE:
            days += 1

    return max(1, days)


def compute_carbon(
    profile: SellerProfile,
    *,
    quantity: int,
    priority: Priority,
    rng: RandomSource,
    policy: SellerPolicyConfig,
    variant: ProviderVariant | None = None,
) -> float:
    """Aggregate order footprint in kg CO2e, at least 1kg."""
    unit = profile.inventory.carbon_footprint * (variant.carbon_multiplier if variant else 1.0)
    unit *= 1.0 + rng.uniform(-policy.carbon_jitter, policy.carbon_jitter)

    if priority == "carbon":
        unit *= CARBON_SPECIALIZATION[profile.personality.sustainability_focus]

    return round(max(MIN_ORDER_CARBON, unit * quantity), 1)


def generate_offer(
    profile: SellerProfile,
    *,
    quantity: int,
    round_number: int,
    buyer_message: str,
    priority: Priority,
    rng: RandomSource,
    policy: SellerPolicyConfig = MULTI_SELLER_POLICY,
    variant: ProviderVariant | None = None,
) -> Offer:
    """
    Compute a seller's offer for one round.

    Args:
        profile: Seller profile with base terms and personality
        quantity: Units requested
        round_number: 1-based round
        buyer_message: Latest buyer text (scanned for urgency)
        priority: Buyer's optimization priority
        rng: Random source (inject a seeded one for reproducible runs)
        policy: Mode-specific floor and jitter bounds
        variant: Provider-variant multipliers, if comparing providers

    Returns:
        A fresh Offer
    """
    price = compute_total_price(
        profile, quantity=quantity, round_number=round_number,
        rng=rng, policy=policy, variant=variant,
    )
    delivery_days = compute_delivery_days(
        profile, buyer_message=buyer_message, priority=priority, rng=rng, variant=variant,
    )
    carbon = compute_carbon(
        profile, quantity=quantity, priority=priority, rng=rng, policy=policy, variant=variant,
    )

    return Offer(
        seller_id=profile.seller_id,
        seller_name=profile.display_name,
        price=price,
        carbon_footprint=carbon,
        delivery_days=delivery_days,
        certifications=profile.inventory.certifications,
        trust_score=profile.trust_score,
        round_number=round_number,
    )
