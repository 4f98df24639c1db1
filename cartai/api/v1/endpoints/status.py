"""
Status, health and catalog endpoints.

WHAT: Health monitoring plus the seller roster and provider variant table
WHY: Quick diagnostics, and the frontend needs to know which stores and providers exist
HOW: FastAPI endpoints calling provider ping and DB ping, static tables
"""

from fastapi import APIRouter, Depends
from typing import List

from ...deps import get_llm_provider, get_seller_roster
from ....core.database import ping_database
from ....core.config import settings
from ....llm.provider import LLMProvider
from ....llm.types import ProviderError
from ....models.negotiation import ProviderVariant, SellerProfile
from ....services.provider_variants import PROVIDER_VARIANTS
from ....utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/llm/status")
async def llm_status(provider: LLMProvider = Depends(get_llm_provider)):
    """
    Check LLM provider status.

    WHAT: Get health status of configured LLM provider and database
    WHY: Frontend can show whether agents will use live models or fallback text
    HOW: Call provider.ping() and database.ping_database()

    Returns:
        JSON with provider status and database status
    """
    try:
        status = await provider.ping()
        llm_dict = {
            "available": status.available,
            "base_url": status.base_url,
            "models": status.models,
            "error": status.error
        }
    except ProviderError as e:
        logger.error(f"Failed to get LLM status: {e}")
        llm_dict = {
            "available": False,
            "base_url": settings.OPENROUTER_BASE_URL,
            "models": None,
            "error": str(e)
        }

    return {
        "llm": llm_dict,
        "database": ping_database()
    }


@router.get("/health")
async def health_check(provider: LLMProvider = Depends(get_llm_provider)):
    """
    Overall application health check.

    Negotiations still complete on fallback text when the LLM is down, so
    only the database decides between healthy and unhealthy; a missing LLM
    reports degraded.
    """
    try:
        llm_available = (await provider.ping()).available
    except ProviderError as e:
        logger.error(f"Health check LLM failed: {e}")
        llm_available = False

    db_available = ping_database()["available"]

    if not db_available:
        overall = "unhealthy"
    elif not llm_available:
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "status": overall,
        "version": settings.APP_VERSION,
        "app_name": settings.APP_NAME,
        "components": {
            "llm": {
                "available": llm_available,
                "provider": settings.LLM_PROVIDER
            },
            "database": {
                "available": db_available
            }
        }
    }


@router.get("/sellers", response_model=List[SellerProfile])
async def list_sellers(roster: List[SellerProfile] = Depends(get_seller_roster)):
    return roster


@router.get("/providers", response_model=List[ProviderVariant])
async def list_providers():
    return list(PROVIDER_VARIANTS.values())
