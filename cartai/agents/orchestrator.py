"""
Negotiation orchestrator.

WHAT: Round loop driving one buyer against a roster of sellers
WHY: Coordinate turns, track offers, emit message / metric / complete events in causal order
HOW: Async generator over rounds; the decision strategy and seller policy carry the mode differences
"""

import asyncio
import inspect
import random
import time
from typing import AsyncIterator, Awaitable, Callable, Sequence

from ..llm.provider import LLMProvider
from ..llm.provider_factory import get_provider
from ..models.negotiation import (
    AgentMessage,
    MultiSellerConfig,
    NegotiationResult,
    NegotiationUpdate,
    Offer,
    Priority,
    SingleSellerConfig,
)
from .buyer_agent import BuyerAgent, get_buyer_strategy
from .seller_agent import SellerAgent
from .offer_policy import MULTI_SELLER_POLICY, SINGLE_SELLER_POLICY, RandomSource
from .profiles import find_profile
from ..services.decision_engine import (
    BudgetVerdictDecision,
    DecisionContext,
    DecisionStrategy,
    RankedDecision,
)
from ..services.provider_variants import get_provider_variant
from ..services.ranking import best_offer, latest_offers
from ..utils.exceptions import UnknownSellerException
from ..utils.logger import get_logger
from ..core.config import settings

logger = get_logger(__name__)

UpdateCallback = Callable[[NegotiationUpdate], "Awaitable[None] | None"]
VariantUpdateCallback = Callable[[str, NegotiationUpdate], "Awaitable[None] | None"]


async def _deliver(callback: Callable, *args) -> None:
    """Invoke a sync or async callback and wait for it."""
    outcome = callback(*args)
    if inspect.isawaitable(outcome):
        await outcome


class NegotiationEngine:
    """
    Orchestrator for buyer-seller negotiation rounds.

    WHAT: Fixed-round state machine shared by the multi-seller and single-seller modes
    WHY: One engine, configured by roster size, seller policy and decision strategy
    HOW: Buyer turn -> every seller in roster order -> metric; decision after the last round
    """

    def __init__(
        self,
        *,
        buyer: BuyerAgent,
        sellers: Sequence[SellerAgent],
        decision: DecisionStrategy,
        product: str,
        quantity: int,
        budget: float,
        priority: Priority,
        buyer_name: str,
        total_rounds: int,
        pacing_seconds: float | None = None
    ):
        """
        Initialize negotiation engine.

        Args:
            buyer: Buyer agent
            sellers: Seller agents in roster order
            decision: Strategy producing the NegotiationResult
            product: Product description
            quantity: Units requested
            budget: Per-unit budget
            priority: Buyer's optimization priority
            buyer_name: Display name used in agent text
            total_rounds: Number of rounds to run
            pacing_seconds: Pause after each event (defaults to settings)
        """
        self.buyer = buyer
        self.sellers = list(sellers)
        self.decision = decision
        self.product = product
        self.quantity = quantity
        self.budget = budget
        self.priority = priority
        self.buyer_name = buyer_name
        self.total_rounds = total_rounds
        self.pacing_seconds = (
            pacing_seconds if pacing_seconds is not None else settings.NEGOTIATION_PACING_SECONDS
        )

        # Owned by this run only
        self.offer_history: list[Offer] = []
        self.messages: list[AgentMessage] = []
        self.result: NegotiationResult | None = None

    @property
    def seller_ids(self) -> list[str]:
        return [seller.seller_id for seller in self.sellers]

    async def _pause(self) -> None:
        if self.pacing_seconds > 0:
            await asyncio.sleep(self.pacing_seconds)

    def _record(self, message: AgentMessage) -> NegotiationUpdate:
        self.messages.append(message)
        return NegotiationUpdate.for_message(message)

    async def events(self) -> AsyncIterator[NegotiationUpdate]:
        """
        Run every round and yield updates as they happen.

        WHAT: Execute the negotiation with event emission
        WHY: Transport layers forward each update as it is produced
        HOW: Sequential awaits; agent errors propagate and end the stream without a complete event

        Yields:
            NegotiationUpdate for each message, each round's metric, then one complete
        """
        started = time.monotonic()
        strategy = get_buyer_strategy(self.priority, self.budget * self.quantity)

        logger.info(
            f"Starting negotiation for {self.quantity} {self.product}: priority={self.priority}, "
            f"sellers={len(self.sellers)}, rounds={self.total_rounds}"
        )

        for round_number in range(1, self.total_rounds + 1):
            # === BUYER TURN ===
            if round_number == 1:
                buyer_text = await self.buyer.opening_request(
                    self.product, self.quantity, self.priority, strategy, self.buyer_name
                )
            else:
                buyer_text = await self.buyer.counter(
                    self.product, self.quantity, self.priority, strategy,
                    self.offer_history, round_number, self.buyer_name
                )

            yield self._record(AgentMessage(
                role="buyer",
                content=buyer_text,
                round_number=round_number,
                model=self.buyer.model,
            ))
            await self._pause()

            # === SELLER TURNS (roster order) ===
            for seller in self.sellers:
                offer = seller.make_offer(
                    quantity=self.quantity,
                    round_number=round_number,
                    buyer_message=buyer_text,
                    priority=self.priority,
                )
                self.offer_history.append(offer)

                reply = await seller.reply(
                    product=self.product,
                    quantity=self.quantity,
                    buyer_message=buyer_text,
                    offer=offer,
                    buyer_name=self.buyer_name,
                )
                yield self._record(AgentMessage(
                    role="seller",
                    content=reply,
                    round_number=round_number,
                    seller_id=seller.seller_id,
                    seller_name=seller.profile.display_name,
                    model=seller.model,
                    offer=offer,
                ))
                await self._pause()

            # === METRIC ===
            current_best = best_offer(latest_offers(self.offer_history, self.seller_ids), self.priority)
            progress = round(round_number / self.total_rounds * 100, 1)
            logger.debug(
                f"Round {round_number}/{self.total_rounds} best: {current_best.seller_name} "
                f"(price={current_best.price}, days={current_best.delivery_days}, "
                f"carbon={current_best.carbon_footprint})"
            )
            yield NegotiationUpdate.for_metric(current_best, progress)
            await self._pause()

        # === DECISION ===
        self.result = await self.decision.decide(DecisionContext(
            product=self.product,
            quantity=self.quantity,
            budget=self.budget,
            priority=self.priority,
            offer_history=tuple(self.offer_history),
            seller_ids=self.seller_ids,
            total_rounds=self.total_rounds,
            duration=round(time.monotonic() - started, 3),
        ))

        logger.info(
            f"Negotiation completed: winner={self.result.winner.seller_name}, "
            f"messages={len(self.messages)}, offers={len(self.offer_history)}"
        )
        yield NegotiationUpdate.for_complete(self.result)

    async def run(self, on_update: UpdateCallback) -> NegotiationResult:
        """
        Drive the negotiation, delivering every update to on_update in order.

        Returns:
            The same result carried by the complete update

        Raises:
            Whatever an agent or the decision strategy raises; no complete update is sent then
        """
        async for update in self.events():
            await _deliver(on_update, update)
        return self.result


def build_multi_seller_engine(
    config: MultiSellerConfig,
    provider: LLMProvider,
    *,
    rng: RandomSource | None = None,
    pacing_seconds: float | None = None
) -> NegotiationEngine:
    """Wire agents and the ranked decision for a negotiation against the whole roster."""
    rng = rng or random.Random()
    variant = config.provider_variant

    buyer = BuyerAgent(
        provider,
        model=variant.buyer_model if variant else None,
        total_rounds=config.total_rounds,
    )
    sellers = [
        SellerAgent(profile, provider, policy=MULTI_SELLER_POLICY, rng=rng, variant=variant)
        for profile in config.sellers
    ]
    return NegotiationEngine(
        buyer=buyer,
        sellers=sellers,
        decision=RankedDecision(provider),
        product=config.product,
        quantity=config.quantity,
        budget=config.budget,
        priority=config.priority,
        buyer_name=config.buyer_name,
        total_rounds=config.total_rounds,
        pacing_seconds=pacing_seconds,
    )


def build_single_seller_engine(
    config: SingleSellerConfig,
    provider: LLMProvider,
    *,
    rng: RandomSource | None = None,
    pacing_seconds: float | None = None
) -> NegotiationEngine:
    """
    Wire agents and the budget verdict for a negotiation against one seller.

    Raises:
        UnknownSellerException: If config.seller_id is not in the roster
    """
    profile = find_profile(config.sellers, config.seller_id)
    if profile is None:
        raise UnknownSellerException(config.seller_id)

    buyer = BuyerAgent(provider, model=config.buyer_model, total_rounds=config.total_rounds)
    seller = SellerAgent(
        profile,
        provider,
        model=config.seller_model,
        policy=SINGLE_SELLER_POLICY,
        rng=rng or random.Random(),
    )
    return NegotiationEngine(
        buyer=buyer,
        sellers=[seller],
        decision=BudgetVerdictDecision(),
        product=config.product,
        quantity=config.quantity,
        budget=config.budget,
        priority=config.priority,
        buyer_name=config.buyer_name,
        total_rounds=config.total_rounds,
        pacing_seconds=pacing_seconds,
    )


async def run_multi_seller_negotiation(
    config: MultiSellerConfig,
    on_update: UpdateCallback,
    *,
    provider: LLMProvider | None = None,
    rng: RandomSource | None = None,
    pacing_seconds: float | None = None
) -> NegotiationResult:
    """
    Negotiate against every seller in the roster.

    Args:
        config: Run inputs
        on_update: Called in order for every update (sync or async)
        provider: LLM provider (defaults to the configured singleton)
        rng: Random source for seller offers (unseeded by default)
        pacing_seconds: Pause between updates (defaults to settings)

    Returns:
        The NegotiationResult also carried by the complete update
    """
    engine = build_multi_seller_engine(
        config, provider or get_provider(), rng=rng, pacing_seconds=pacing_seconds
    )
    return await engine.run(on_update)


async def run_single_seller_negotiation(
    config: SingleSellerConfig,
    on_update: UpdateCallback,
    *,
    provider: LLMProvider | None = None,
    rng: RandomSource | None = None,
    pacing_seconds: float | None = None
) -> None:
    """
    Negotiate against the one seller named by config.seller_id.

    Completion is signaled only through the complete update.

    Raises:
        UnknownSellerException: Before any agent call, if the seller is not in the roster
    """
    engine = build_single_seller_engine(
        config, provider or get_provider(), rng=rng, pacing_seconds=pacing_seconds
    )
    await engine.run(on_update)


async def run_provider_comparison(
    config: MultiSellerConfig,
    variant_ids: Sequence[str],
    on_update: VariantUpdateCallback,
    *,
    provider: LLMProvider | None = None,
    pacing_seconds: float | None = None
) -> dict[str, NegotiationResult]:
    """
    Run one multi-seller negotiation per provider variant, concurrently.

    Each run owns its agents, random source and offer history; updates arrive
    as (variant_id, update) with no ordering guarantee across variants.

    Raises:
        UnknownProviderVariantException: Before any run starts, if an id is unknown
    """
    variants = [get_provider_variant(variant_id) for variant_id in variant_ids]
    provider = provider or get_provider()

    async def run_variant(variant) -> NegotiationResult:
        variant_config = config.model_copy(update={"provider_variant": variant})

        async def forward(update: NegotiationUpdate) -> None:
            await _deliver(on_update, variant.variant_id, update)

        return await run_multi_seller_negotiation(
            variant_config,
            forward,
            provider=provider,
            rng=random.Random(),
            pacing_seconds=pacing_seconds,
        )

    if not variants:
        return {}

    logger.info(f"Comparing providers: {', '.join(v.variant_id for v in variants)}")
    tasks = [
        asyncio.create_task(run_variant(variant), name=f"compare-{variant.variant_id}")
        for variant in variants
    ]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        # One failed run (or a cancelled caller) stops every sibling before we return
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for variant, task in zip(variants, tasks):
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Provider comparison aborted: {variant.variant_id} failed with {task.exception()!r}")
            raise task.exception()

    return {variant.variant_id: task.result() for variant, task in zip(variants, tasks)}
