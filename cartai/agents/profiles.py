"""
Default seller roster.

WHAT: The three stores offered to shoppers out of the box
WHY: Each store leads with a different strength (sustainability, speed, price)
HOW: Static SellerProfile values; callers may pass their own roster instead
"""

from ..models.negotiation import SellerInventory, SellerPersonality, SellerProfile
from ..core.config import settings


DEFAULT_SELLER_PROFILES: list[SellerProfile] = [
    SellerProfile(
        seller_id="seller_eco_premium",
        display_name="EcoSupply",
        model="openai/gpt-4o",
        personality=SellerPersonality(
            sustainability_focus="very_high",
            price_point="premium",
            negotiation_flexibility="medium",
        ),
        inventory=SellerInventory(
            base_price=120,
            carbon_footprint=12,
            delivery_days=5,
            certifications=("B-Corp", "Carbon-Neutral", "Fair Trade"),
        ),
        tactics=(
            "Emphasize quality and certifications",
            "Provide detailed carbon breakdowns",
            "Willing to slightly reduce price for bulk orders",
        ),
        trust_score=4.8,
    ),
    SellerProfile(
        seller_id="seller_fast_trader",
        display_name="QuickShip",
        model=settings.SELLER_MODEL,
        personality=SellerPersonality(
            sustainability_focus="medium",
            price_point="mid",
            negotiation_flexibility="very_high",
        ),
        inventory=SellerInventory(
            base_price=95,
            carbon_footprint=18,
            delivery_days=1,
            certifications=("ISO-14001",),
        ),
        tactics=(
            "Lead with speed and convenience",
            "Aggressive price matching",
            "Offer tiered delivery options",
        ),
        trust_score=4.5,
    ),
    SellerProfile(
        seller_id="seller_budget",
        display_name="ValueGreen",
        model=settings.SELLER_MODEL,
        personality=SellerPersonality(
            sustainability_focus="low",
            price_point="budget",
            negotiation_flexibility="very_high",
        ),
        inventory=SellerInventory(
            base_price=75,
            carbon_footprint=22,
            delivery_days=10,
            certifications=(),
        ),
        tactics=(
            "Undercut all competitors on price",
            "Bulk discount offers",
            "Fast to respond and adapt",
        ),
        trust_score=4.1,
    ),
]


def find_profile(profiles: list[SellerProfile], seller_id: str) -> SellerProfile | None:
    return next((profile for profile in profiles if profile.seller_id == seller_id), None)
