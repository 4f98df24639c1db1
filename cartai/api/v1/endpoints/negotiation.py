"""
Negotiation streaming endpoints.

WHAT: Start a negotiation and stream its updates as Server-Sent Events
WHY: The frontend renders messages, live best offer and the result as they happen
HOW: Validate and resolve inputs up front, then EventSourceResponse over stream_negotiation
"""

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from typing import List

from ...deps import get_llm_provider, get_seller_roster
from ....agents.orchestrator import (
    run_multi_seller_negotiation,
    run_provider_comparison,
    run_single_seller_negotiation,
)
from ....agents.profiles import find_profile
from ....llm.provider import LLMProvider
from ....models.api_schemas import CompareRequest, NegotiateRequest, NegotiateStoreRequest
from ....models.negotiation import SellerProfile
from ....services.provider_variants import get_provider_variant
from ....services.update_channel import stream_negotiation
from ....utils.exceptions import UnknownSellerException, ValidationException
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _build_config(request: NegotiateRequest, roster: List[SellerProfile]):
    """Turn a request into an engine config, reporting model errors as 400s."""
    try:
        return request.to_config(roster)
    except ValidationError as e:
        raise ValidationException(
            "Invalid negotiation configuration",
            field_errors=[
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in e.errors()
            ]
        )


@router.post("/negotiate")
async def negotiate(
    request: NegotiateRequest,
    provider: LLMProvider = Depends(get_llm_provider),
    roster: List[SellerProfile] = Depends(get_seller_roster)
):
    """
    Negotiate with every seller in the roster.

    WHAT: Multi-seller negotiation streamed as SSE
    WHY: Main shopping flow
    HOW: Resolve optional provider variant (400 if unknown), then stream

    Returns:
        EventSourceResponse of message / metric / complete frames, or one error frame
    """
    config = _build_config(request, roster)
    if request.provider:
        config = config.model_copy(update={"provider_variant": get_provider_variant(request.provider)})

    logger.info(
        f"Negotiation requested: {config.quantity} {config.product}, priority={config.priority}, "
        f"provider={request.provider or 'default'}"
    )
    return EventSourceResponse(stream_negotiation(
        lambda channel: run_multi_seller_negotiation(config, channel.publish, provider=provider)
    ))


@router.post("/negotiate/store")
async def negotiate_store(
    request: NegotiateStoreRequest,
    provider: LLMProvider = Depends(get_llm_provider),
    roster: List[SellerProfile] = Depends(get_seller_roster)
):
    """
    Negotiate with one store.

    Raises:
        UnknownSellerException: 404 before streaming starts
    """
    config = _build_config(request, roster)
    if find_profile(config.sellers, config.seller_id) is None:
        raise UnknownSellerException(config.seller_id)

    logger.info(f"Store negotiation requested with {config.seller_id}: {config.quantity} {config.product}")
    return EventSourceResponse(stream_negotiation(
        lambda channel: run_single_seller_negotiation(config, channel.publish, provider=provider)
    ))


@router.post("/negotiate/compare")
async def negotiate_compare(
    request: CompareRequest,
    provider: LLMProvider = Depends(get_llm_provider),
    roster: List[SellerProfile] = Depends(get_seller_roster)
):
    """Run the same negotiation under several provider variants; frames carry the variant id."""
    config = _build_config(request, roster)
    for variant_id in request.providers:
        get_provider_variant(variant_id)

    logger.info(f"Provider comparison requested: {request.providers}")
    return EventSourceResponse(stream_negotiation(
        lambda channel: run_provider_comparison(
            config, request.providers, channel.publish_variant, provider=provider
        )
    ))
