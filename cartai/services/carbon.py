"""
Carbon footprint calculations.

WHAT: Industry-average lookup, savings and relatable conversions
WHY: Frame the winning offer's footprint for the user
HOW: Keyword-matched averages per product; 0.4 kg CO2 per mile driven
"""

# Industry average carbon footprints per unit by product category (kg CO2)
INDUSTRY_AVERAGES: dict[str, float] = {
    "default": 30.0,
    "toothbrushes": 25.0,
    "shoes": 35.0,
    "electronics": 50.0,
    "clothing": 20.0,
    "furniture": 60.0,
}

# First matching keyword group wins
_CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("toothbrushes", ("toothbrush",)),
    ("shoes", ("shoe", "sneaker")),
    ("electronics", ("electronic", "laptop", "phone")),
    ("clothing", ("shirt", "clothing", "apparel")),
    ("furniture", ("furniture", "chair", "desk")),
]

CO2_PER_MILE_DRIVEN = 0.4


def get_industry_average(product_name: str) -> float:
    """Per-unit industry average footprint for a product description."""
    lower_product = product_name.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lower_product for keyword in keywords):
            return INDUSTRY_AVERAGES[category]
    return INDUSTRY_AVERAGES["default"]


def calculate_carbon_savings(offer_carbon_per_unit: float, average_carbon: float) -> float:
    """Per-unit savings against the average, never negative."""
    return max(0.0, average_carbon - offer_carbon_per_unit)


def carbon_to_miles(kg_co2: float) -> int:
    """Convert kg CO2 to equivalent miles not driven."""
    return round(kg_co2 / CO2_PER_MILE_DRIVEN)


def compute_order_savings(product: str, order_carbon: float, quantity: int) -> tuple[float, int]:
    """
    Savings for a whole order.

    Args:
        product: Product description used for the average lookup
        order_carbon: Aggregate footprint of the winning offer
        quantity: Units ordered

    Returns:
        Tuple of (kg CO2 saved for the order, equivalent miles)
    """
    per_unit = order_carbon / quantity
    saved = round(calculate_carbon_savings(per_unit, get_industry_average(product)) * quantity, 1)
    return saved, carbon_to_miles(saved)


def calculate_carbon_reduction(offer_carbon: float, average_carbon: float) -> int:
    """Percentage reduction versus the average (negative when worse)."""
    if average_carbon == 0:
        return 0
    return round((average_carbon - offer_carbon) / average_carbon * 100)


def format_carbon_with_context(kg_co2: float, average_carbon: float) -> str:
    reduction = calculate_carbon_reduction(kg_co2, average_carbon)
    if reduction > 0:
        return f"{kg_co2:g}kg CO2 ({reduction}% less than average)"
    if reduction < 0:
        return f"{kg_co2:g}kg CO2 ({abs(reduction)}% more than average)"
    return f"{kg_co2:g}kg CO2 (industry average)"


def get_carbon_comparison(kg_co2: float) -> str:
    """A relatable sentence for the amount of CO2 saved."""
    miles = carbon_to_miles(kg_co2)

    if miles > 500:
        return f"Not driving {miles} miles - that's like a road trip from SF to LA!"
    if miles > 100:
        return f"Not driving {miles} miles - that's like a weekend getaway!"
    if miles > 50:
        return f"Not driving {miles} miles - that's like your daily commute for a week!"
    if miles > 10:
        return f"Not driving {miles} miles"
    return f"Saving {kg_co2:g}kg CO2"
