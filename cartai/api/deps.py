"""
Shared FastAPI dependencies.

WHAT: Providers for the LLM backend and the seller roster
WHY: Endpoints receive collaborators instead of reaching for globals
HOW: Plain functions used with Depends(); tests swap them via dependency_overrides
"""

from typing import List

from ..agents.profiles import DEFAULT_SELLER_PROFILES
from ..llm.provider import LLMProvider
from ..llm.provider_factory import get_provider
from ..models.negotiation import SellerProfile


def get_llm_provider() -> LLMProvider:
    return get_provider()


def get_seller_roster() -> List[SellerProfile]:
    return list(DEFAULT_SELLER_PROFILES)
