"""
API v1 router aggregation.

WHAT: Mount the status, negotiation and saved-conversation routes under /api/v1
WHY: One versioned prefix for every route the shopping UI calls
HOW: A prefixed parent router; each endpoint module keeps its own tag
"""

from fastapi import APIRouter

from .endpoints import status, negotiation, conversations

API_V1_PREFIX = "/api/v1"

api_router = APIRouter(prefix=API_V1_PREFIX)

api_router.include_router(status.router, tags=["status"])
api_router.include_router(negotiation.router, tags=["negotiation"])
api_router.include_router(conversations.router, tags=["conversations"])
