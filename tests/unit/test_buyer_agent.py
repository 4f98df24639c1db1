"""
Unit tests for the buyer agent.

WHAT: Test strategy selection, opening requests and counters with and without a working model
WHY: The buyer must always speak, even when every model call fails
HOW: MockLLMProvider with scripted responses or forced failures
"""

import httpx
import pytest
import respx

from cartai.agents.buyer_agent import BuyerAgent, get_buyer_strategy
from cartai.agents.offer_policy import mentions_urgency
from cartai.llm.openrouter import OpenRouterProvider
from cartai.models.negotiation import Offer
from tests.fixtures.mock_llm import MockLLMProvider


def make_offer(seller_id, name, price, days, carbon, round_number=1):
    return Offer(
        seller_id=seller_id,
        seller_name=name,
        price=price,
        carbon_footprint=carbon,
        delivery_days=days,
        round_number=round_number,
    )


@pytest.fixture
def offers():
    return [
        make_offer("eco", "EcoSupply", price=1200, days=5, carbon=120),
        make_offer("quick", "QuickShip", price=950, days=3, carbon=180),
        make_offer("value", "ValueGreen", price=750, days=10, carbon=220),
    ]


@pytest.mark.unit
class TestBuyerStrategy:

    def test_speed(self):
        strategy = get_buyer_strategy("speed", 1000)

        assert strategy.max_price == pytest.approx(1300)
        assert strategy.max_days == 2
        assert strategy.style == "urgent"
        assert strategy.max_carbon is None

    def test_carbon(self):
        strategy = get_buyer_strategy("carbon", 1000)

        assert strategy.max_price == pytest.approx(1100)
        assert strategy.max_carbon == 15
        assert strategy.max_days == 14
        assert strategy.style == "analytical"

    def test_price(self):
        strategy = get_buyer_strategy("price", 1000)

        assert strategy.max_price == 1000
        assert strategy.max_days == 7
        assert strategy.style == "aggressive"


@pytest.mark.unit
class TestOpeningRequest:

    @pytest.mark.asyncio
    async def test_uses_model_text(self):
        provider = MockLLMProvider(responses=['"Dear Seller, I need 10 toothbrushes. Best regards, Alex"'])
        buyer = BuyerAgent(provider, model="buyer-model")

        text = await buyer.opening_request(
            "toothbrushes", 10, "price", get_buyer_strategy("price", 1000), "Alex"
        )

        assert text == "Dear Seller, I need 10 toothbrushes. Best regards, Alex"
        assert provider.calls[0]["model"] == "buyer-model"
        assert "Product needed: 10 toothbrushes" in provider.calls[0]["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_fallback_model_is_tried_once(self):
        provider = MockLLMProvider(responses=["Backup text"], failing_models=["primary"])
        buyer = BuyerAgent(provider, model="primary", fallback_model="backup")

        text = await buyer.opening_request("shoes", 2, "speed", get_buyer_strategy("speed", 200), "Alex")

        assert text == "Backup text"
        assert [call["model"] for call in provider.calls] == ["primary", "backup"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("priority,phrase", [
        ("speed", "fastest possible delivery"),
        ("carbon", "lowest carbon footprint"),
        ("price", "best possible price"),
    ])
    async def test_fallback_by_priority(self, failing_provider, priority, phrase):
        buyer = BuyerAgent(failing_provider, model="primary", fallback_model="backup")

        text = await buyer.opening_request(
            "toothbrushes", 10, priority, get_buyer_strategy(priority, 1000), "Alex"
        )

        assert phrase in text
        assert text.startswith("Dear Seller,")
        assert text.endswith("Best regards, Alex")
        assert len(failing_provider.calls) == 2

    @pytest.mark.asyncio
    async def test_empty_model_output_counts_as_failure(self):
        provider = MockLLMProvider(responses=["<think>planning...</think>   "])
        buyer = BuyerAgent(provider, model="primary", fallback_model="primary")

        text = await buyer.opening_request("shoes", 1, "price", get_buyer_strategy("price", 100), "Sam")

        assert "best possible price" in text
        assert len(provider.calls) == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_transport_failure_falls_back_to_template(self):
        route = respx.post("https://openrouter.test/api/v1/chat/completions").mock(
            side_effect=httpx.ReadError("reset")
        )
        provider = OpenRouterProvider(
            enabled=True, api_key="test-key", base_url="https://openrouter.test/api/v1",
            max_retries=1, retry_delay=0
        )
        buyer = BuyerAgent(provider, model="primary", fallback_model="backup")
        strategy = get_buyer_strategy("price", 1000)

        text = await buyer.opening_request("toothbrushes", 10, "price", strategy, "Alex")

        assert text == BuyerAgent.fallback_opening("toothbrushes", 10, "price", strategy, "Alex")
        assert route.call_count == 2
        await provider.close()


@pytest.mark.unit
class TestCounter:

    @pytest.mark.asyncio
    async def test_prompt_lists_latest_offers_and_best(self, offers):
        provider = MockLLMProvider(responses=["@ValueGreen can you beat $750?"])
        buyer = BuyerAgent(provider, total_rounds=6)
        history = offers + [make_offer("value", "ValueGreen", price=700, days=10, carbon=220, round_number=2)]

        text = await buyer.counter(
            "toothbrushes", 10, "price", get_buyer_strategy("price", 1000), history, 3, "Alex"
        )

        prompt = provider.calls[0]["messages"][1]["content"]
        assert text == "@ValueGreen can you beat $750?"
        assert "Round 3/6" in prompt
        assert "ValueGreen: $700" in prompt
        assert "$750" not in prompt
        assert "Current best offer (by your priority): ValueGreen" in prompt

    @pytest.mark.asyncio
    async def test_speed_fallback_is_urgent(self, failing_provider, offers):
        buyer = BuyerAgent(failing_provider)

        text = await buyer.counter(
            "toothbrushes", 10, "speed", get_buyer_strategy("speed", 1000), offers, 2, "Alex"
        )

        assert text == "@QuickShip - Can you deliver faster than 3 days? We need this urgently."
        assert mentions_urgency(text)

    @pytest.mark.asyncio
    async def test_speed_fallback_when_already_next_day(self, failing_provider):
        offers = [make_offer("quick", "QuickShip", price=950, days=1, carbon=180)]
        buyer = BuyerAgent(failing_provider)

        text = await buyer.counter(
            "toothbrushes", 10, "speed", get_buyer_strategy("speed", 1000), offers, 2, "Alex"
        )

        assert text.startswith("@QuickShip - Competitive price")

    @pytest.mark.asyncio
    async def test_carbon_fallback(self, failing_provider, offers):
        buyer = BuyerAgent(failing_provider)

        text = await buyer.counter(
            "toothbrushes", 10, "carbon", get_buyer_strategy("carbon", 1000), offers, 2, "Alex"
        )

        assert text.startswith("@EcoSupply - Your carbon footprint looks good.")

    @pytest.mark.asyncio
    async def test_price_fallback(self, failing_provider, offers):
        buyer = BuyerAgent(failing_provider)

        text = await buyer.counter(
            "toothbrushes", 10, "price", get_buyer_strategy("price", 1000), offers, 2, "Alex"
        )

        assert text == "@ValueGreen - Competitive price, but can you go lower? We're comparing multiple suppliers."

    @pytest.mark.asyncio
    async def test_no_offers_skips_model(self):
        provider = MockLLMProvider()
        buyer = BuyerAgent(provider)

        text = await buyer.counter(
            "toothbrushes", 10, "price", get_buyer_strategy("price", 1000), [], 2, "Alex"
        )

        assert "10 toothbrushes" in text
        assert provider.calls == []
