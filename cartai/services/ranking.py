"""
Offer ranking policy.

WHAT: Pick the best offer for a priority and list the runner-ups
WHY: Both the live metric stream and the final decision rank the same way
HOW: Pure functions keyed on one metric per priority, first-seen wins ties
"""

from typing import Callable, Iterable, Sequence

from ..models.negotiation import Offer, Priority
from ..utils.exceptions import EmptyOfferSetException

PRIORITY_METRICS: dict[str, Callable[[Offer], float]] = {
    "speed": lambda offer: offer.delivery_days,
    "carbon": lambda offer: offer.carbon_footprint,
    "price": lambda offer: offer.price,
}


def latest_offers(offer_history: Iterable[Offer], seller_ids: Sequence[str] | None = None) -> list[Offer]:
    """
    Reduce an offer history to the most recent offer per seller.

    Args:
        offer_history: Offers in creation order
        seller_ids: Roster order to report in; defaults to first-appearance order

    Returns:
        At most one offer per seller, sellers without offers omitted
    """
    latest: dict[str, Offer] = {}
    for offer in offer_history:
        latest[offer.seller_id] = offer

    order = list(seller_ids) if seller_ids is not None else list(latest)
    return [latest[seller_id] for seller_id in order if seller_id in latest]


def best_offer(offers: Sequence[Offer], priority: Priority) -> Offer:
    """
    Return the offer minimizing the priority metric.

    Raises:
        EmptyOfferSetException: If offers is empty
    """
    if not offers:
        raise EmptyOfferSetException(priority)

    metric = PRIORITY_METRICS[priority]
    best = offers[0]
    for offer in offers[1:]:
        # Strict comparison keeps the first-seen offer on ties
        if metric(offer) < metric(best):
            best = offer
    return best


def rank_alternatives(offers: Sequence[Offer], winner: Offer, priority: Priority, limit: int = 2) -> list[Offer]:
    """Runner-ups sorted by the priority metric, winner excluded."""
    metric = PRIORITY_METRICS[priority]
    remaining = [offer for offer in offers if offer.offer_id != winner.offer_id]
    # sorted() is stable, so ties keep insertion order
    return sorted(remaining, key=metric)[:limit]
