"""
Tests for negotiation domain models and API request schemas.

WHAT: Test validators, payload checks and request-to-config conversion
WHY: Invalid inputs must be rejected before a run starts
HOW: Construct models directly and assert on ValidationError
"""

import pytest
from pydantic import ValidationError

from cartai.agents.profiles import DEFAULT_SELLER_PROFILES
from cartai.models.api_schemas import CompareRequest, NegotiateRequest, NegotiateStoreRequest
from cartai.models.negotiation import (
    AgentMessage,
    MultiSellerConfig,
    NegotiationUpdate,
    Offer,
    UpdateData,
)


def config_values(**overrides) -> dict:
    values = dict(
        product="bamboo toothbrushes",
        quantity=10,
        budget=100,
        priority="price",
        sellers=DEFAULT_SELLER_PROFILES,
    )
    values.update(overrides)
    return values


@pytest.mark.unit
class TestNegotiationConfig:

    def test_defaults(self):
        config = MultiSellerConfig(**config_values())

        assert config.total_rounds == 6
        assert config.buyer_name == "Customer"
        assert config.provider_variant is None

    @pytest.mark.parametrize("field,value", [
        ("quantity", 0),
        ("budget", 0),
        ("priority", "quality"),
        ("product", ""),
        ("sellers", []),
        ("total_rounds", 0),
        ("total_rounds", 21),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            MultiSellerConfig(**config_values(**{field: value}))

    def test_rejects_duplicate_seller_ids(self):
        roster = [DEFAULT_SELLER_PROFILES[0], DEFAULT_SELLER_PROFILES[0]]

        with pytest.raises(ValidationError, match="seller ids must be unique"):
            MultiSellerConfig(**config_values(sellers=roster))


@pytest.mark.unit
class TestMessagesAndUpdates:

    def test_seller_message_requires_seller_id(self):
        with pytest.raises(ValidationError, match="seller_id"):
            AgentMessage(role="seller", content="We can ship tomorrow.")

    def test_offer_is_frozen(self):
        offer = Offer(seller_id="s", seller_name="S", price=10.0, carbon_footprint=1.0, delivery_days=2)

        with pytest.raises(ValidationError):
            offer.price = 5.0

    def test_offer_ids_are_unique(self):
        first = Offer(seller_id="s", seller_name="S", price=10.0, carbon_footprint=1.0, delivery_days=2)
        second = Offer(seller_id="s", seller_name="S", price=10.0, carbon_footprint=1.0, delivery_days=2)

        assert first.offer_id != second.offer_id

    @pytest.mark.parametrize("update_type", ["message", "metric", "complete"])
    def test_update_requires_matching_payload(self, update_type):
        with pytest.raises(ValidationError):
            NegotiationUpdate(type=update_type, data=UpdateData())

    def test_metric_progress_is_bounded(self):
        offer = Offer(seller_id="s", seller_name="S", price=10.0, carbon_footprint=1.0, delivery_days=2)

        with pytest.raises(ValidationError):
            NegotiationUpdate.for_metric(offer, 120.0)


@pytest.mark.unit
class TestRequestSchemas:

    def test_negotiate_request_to_config_uses_roster(self):
        request = NegotiateRequest(product="  desk lamps ", quantity=2, budget=40, priority="speed", user_name="Sam")

        config = request.to_config(DEFAULT_SELLER_PROFILES)

        assert config.product == "desk lamps"
        assert config.buyer_name == "Sam"
        assert [p.seller_id for p in config.sellers] == [p.seller_id for p in DEFAULT_SELLER_PROFILES]
        assert config.total_rounds == 6

    def test_blank_product_rejected(self):
        with pytest.raises(ValidationError):
            NegotiateRequest(product="   ", quantity=2, budget=40, priority="speed")

    def test_store_request_to_config(self):
        request = NegotiateStoreRequest(
            product="running shoes",
            quantity=1,
            budget=120,
            priority="price",
            store_id="seller_budget",
            seller_model="seller/model",
        )

        config = request.to_config(DEFAULT_SELLER_PROFILES)

        assert config.seller_id == "seller_budget"
        assert config.seller_model == "seller/model"
        assert config.buyer_model is None
        assert config.total_rounds == 4

    def test_compare_request_defaults_to_all_variants(self):
        request = CompareRequest(product="mugs", quantity=4, budget=12, priority="carbon")

        assert request.providers == ["openrouter", "anthropic", "gemini"]

    def test_compare_request_rejects_empty_provider_list(self):
        with pytest.raises(ValidationError):
            CompareRequest(product="mugs", quantity=4, budget=12, priority="carbon", providers=[])
