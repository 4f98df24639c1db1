"""
Pydantic API schemas for the HTTP endpoints.

WHAT: Request and response models for FastAPI
WHY: Type-safe validation and serialization matching frontend interfaces
HOW: Pydantic v2 models with validators and constraints
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from .negotiation import (
    AgentMessage,
    MultiSellerConfig,
    NegotiationResult,
    Priority,
    SellerProfile,
    SingleSellerConfig,
)
from ..core.config import settings


# ========== Negotiation Requests ==========

class NegotiateRequest(BaseModel):
    """Multi-seller negotiation request."""
    product: str = Field(..., min_length=1, max_length=200, description="Product description")
    quantity: int = Field(..., gt=0, description="Units requested")
    budget: float = Field(..., gt=0, description="Budget per unit")
    priority: Priority = Field(..., description="Optimization priority")
    user_name: str = Field(default="Customer", min_length=1, max_length=100, description="Buyer display name")
    provider: Optional[str] = Field(default=None, description="Provider variant id")
    sellers: Optional[List[SellerProfile]] = Field(
        default=None,
        min_length=1,
        description="Custom seller roster (defaults to the built-in stores)"
    )
    total_rounds: Optional[int] = Field(default=None, ge=1, le=20, description="Rounds to run")

    @field_validator("product", "user_name")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    def to_config(self, roster: List[SellerProfile]) -> MultiSellerConfig:
        return MultiSellerConfig(
            product=self.product,
            quantity=self.quantity,
            budget=self.budget,
            priority=self.priority,
            buyer_name=self.user_name,
            sellers=self.sellers or roster,
            total_rounds=self.total_rounds or settings.MULTI_SELLER_ROUNDS,
        )


class NegotiateStoreRequest(NegotiateRequest):
    """Single-store negotiation request."""
    store_id: str = Field(..., min_length=1, max_length=100, description="Seller id from the roster")
    buyer_model: Optional[str] = Field(default=None, description="Model label for buyer turns")
    seller_model: Optional[str] = Field(default=None, description="Model label for seller turns")

    def to_config(self, roster: List[SellerProfile]) -> SingleSellerConfig:
        return SingleSellerConfig(
            product=self.product,
            quantity=self.quantity,
            budget=self.budget,
            priority=self.priority,
            buyer_name=self.user_name,
            sellers=self.sellers or roster,
            seller_id=self.store_id,
            buyer_model=self.buyer_model,
            seller_model=self.seller_model,
            total_rounds=self.total_rounds or settings.SINGLE_SELLER_ROUNDS,
        )


class CompareRequest(NegotiateRequest):
    """Side-by-side negotiation across provider variants."""
    providers: List[str] = Field(
        default_factory=lambda: ["openrouter", "anthropic", "gemini"],
        min_length=1,
        max_length=5,
        description="Provider variant ids to run concurrently"
    )


# ========== Saved Conversations ==========

class ChatMessage(BaseModel):
    """One turn of the shopping chat that preceded the negotiation."""
    id: str = Field(..., min_length=1, max_length=100)
    type: Literal["user", "assistant"]
    content: str = Field(..., max_length=5000)
    timestamp: datetime


class ConversationCreate(BaseModel):
    """Save a conversation."""
    title: Optional[str] = Field(default=None, max_length=200)
    chat_messages: List[ChatMessage] = Field(default_factory=list)
    product: Optional[str] = Field(default=None, max_length=200)
    quantity: Optional[int] = Field(default=None, gt=0)
    budget: Optional[float] = Field(default=None, gt=0)
    selected_priority: Optional[Priority] = None
    negotiation_messages: List[AgentMessage] = Field(default_factory=list)
    negotiation_result: Optional[NegotiationResult] = None


class ConversationUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""
    title: Optional[str] = Field(default=None, max_length=200)
    chat_messages: Optional[List[ChatMessage]] = None
    product: Optional[str] = Field(default=None, max_length=200)
    quantity: Optional[int] = Field(default=None, gt=0)
    budget: Optional[float] = Field(default=None, gt=0)
    selected_priority: Optional[Priority] = None
    negotiation_messages: Optional[List[AgentMessage]] = None
    negotiation_result: Optional[NegotiationResult] = None


class ConversationSummary(BaseModel):
    """List entry for a saved conversation."""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    product: Optional[str] = None
    selected_priority: Optional[Priority] = None
    has_result: bool = False


class ConversationResponse(BaseModel):
    """Full saved conversation."""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    chat_messages: List[ChatMessage]
    product: Optional[str] = None
    quantity: Optional[int] = None
    budget: Optional[float] = None
    selected_priority: Optional[Priority] = None
    negotiation_messages: List[AgentMessage]
    negotiation_result: Optional[NegotiationResult] = None


class DeleteConversationResponse(BaseModel):
    """Response after deleting a conversation."""
    deleted: bool
    conversation_id: str


# ========== Error Response ==========

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    message: str
    details: Optional[object] = None
    timestamp: datetime
