"""
Negotiation domain models.

WHAT: Value objects exchanged between agents, the engine and the transport
WHY: Consistent typing across agents, orchestrator, API and persistence
HOW: Pydantic v2 models; offers, messages and results are frozen once created
"""

from pydantic import BaseModel, Field, model_validator
from typing import Literal
from datetime import datetime, timezone
from uuid import uuid4


Priority = Literal["speed", "carbon", "price"]
FocusLevel = Literal["very_high", "high", "medium", "low"]
PriceTier = Literal["premium", "mid", "budget"]
Verdict = Literal["buyer", "seller", "fair"]
UpdateType = Literal["message", "metric", "complete"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SellerPersonality(BaseModel):
    """Personality triple that drives pricing behaviour and fallback text."""

    model_config = {"frozen": True}

    sustainability_focus: FocusLevel
    price_point: PriceTier
    negotiation_flexibility: FocusLevel


class SellerInventory(BaseModel):
    """Base commercial terms per unit, before any negotiation."""

    model_config = {"frozen": True}

    base_price: float = Field(gt=0.0)
    carbon_footprint: float = Field(ge=0.0, description="kg CO2e per unit")
    delivery_days: int = Field(ge=1)
    certifications: tuple[str, ...] = ()


class SellerProfile(BaseModel):
    """Static characterization of a seller, supplied by the caller."""

    model_config = {"frozen": True}

    seller_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1, max_length=50)
    model: str = Field(description="Backing model label, opaque to the engine")
    personality: SellerPersonality
    inventory: SellerInventory
    tactics: tuple[str, ...] = ()
    trust_score: float | None = Field(default=None, ge=0.0, le=5.0)


class ProviderVariant(BaseModel):
    """
    Multiplier set simulating one backing-model configuration.

    Used when several providers negotiate the same request side by side.
    """

    model_config = {"frozen": True}

    variant_id: str
    name: str
    description: str = ""
    buyer_model: str
    seller_models: dict[PriceTier, str]
    price_multiplier: float = Field(default=1.0, gt=0.0)
    carbon_multiplier: float = Field(default=1.0, gt=0.0)
    delivery_shift: int = 0


class Offer(BaseModel):
    """One seller's terms for the full requested quantity at a point in time."""

    model_config = {"frozen": True}

    offer_id: str = Field(default_factory=lambda: f"offer_{uuid4().hex}")
    seller_id: str
    seller_name: str
    price: float = Field(ge=0.0, description="Total for the requested quantity")
    carbon_footprint: float = Field(ge=0.0, description="Aggregate kg CO2e for the order")
    delivery_days: int = Field(ge=1)
    certifications: tuple[str, ...] = ()
    trust_score: float | None = None
    round_number: int = Field(default=1, ge=1)
    created_at: datetime = Field(default_factory=_now)


class AgentMessage(BaseModel):
    """One turn of dialogue in the negotiation transcript."""

    model_config = {"frozen": True}

    message_id: str = Field(default_factory=lambda: f"msg_{uuid4().hex}")
    role: Literal["buyer", "seller"]
    content: str = Field(max_length=5000)
    timestamp: datetime = Field(default_factory=_now)
    round_number: int = Field(default=1, ge=1)
    seller_id: str | None = None
    seller_name: str | None = None
    model: str | None = None
    offer: Offer | None = None

    @model_validator(mode="after")
    def check_seller_identity(self):
        """Seller turns must say which seller spoke."""
        if self.role == "seller" and not self.seller_id:
            raise ValueError("seller messages require seller_id")
        return self


class NegotiationResult(BaseModel):
    """Terminal artifact of a successful run."""

    model_config = {"frozen": True}

    winner: Offer
    reasoning: str
    carbon_saved: float = Field(default=0.0, ge=0.0)
    carbon_saved_in_miles: int = Field(default=0, ge=0)
    alternatives: list[Offer] = Field(default_factory=list)
    total_rounds: int = Field(ge=1)
    duration: float = Field(default=0.0, ge=0.0, description="Wall-clock seconds")
    verdict: Verdict | None = None


class UpdateData(BaseModel):
    """Payload of a NegotiationUpdate; which fields are set depends on the type."""

    message: AgentMessage | None = None
    current_best: Offer | None = None
    progress: float | None = Field(default=None, ge=0.0, le=100.0)
    result: NegotiationResult | None = None


class NegotiationUpdate(BaseModel):
    """Event pushed to the update sink during a run."""

    type: UpdateType
    data: UpdateData

    @model_validator(mode="after")
    def check_payload(self):
        """Each update type carries its own payload."""
        if self.type == "message" and self.data.message is None:
            raise ValueError("message update requires data.message")
        if self.type == "metric" and (self.data.current_best is None or self.data.progress is None):
            raise ValueError("metric update requires data.current_best and data.progress")
        if self.type == "complete" and self.data.result is None:
            raise ValueError("complete update requires data.result")
        return self

    @classmethod
    def for_message(cls, message: AgentMessage) -> "NegotiationUpdate":
        return cls(type="message", data=UpdateData(message=message))

    @classmethod
    def for_metric(cls, current_best: Offer, progress: float) -> "NegotiationUpdate":
        return cls(type="metric", data=UpdateData(current_best=current_best, progress=progress))

    @classmethod
    def for_complete(cls, result: NegotiationResult) -> "NegotiationUpdate":
        return cls(type="complete", data=UpdateData(result=result))


class NegotiationConfig(BaseModel):
    """Per-run inputs shared by both negotiation modes."""

    model_config = {"frozen": True}

    product: str = Field(min_length=1, max_length=200)
    quantity: int = Field(ge=1)
    budget: float = Field(gt=0.0, description="Per-unit budget cap, not a guarantee")
    priority: Priority
    buyer_name: str = Field(default="Customer", min_length=1, max_length=100)
    sellers: list[SellerProfile] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_sellers(self):
        """Seller ids identify offers, so the roster must not repeat them."""
        ids = [profile.seller_id for profile in self.sellers]
        if len(ids) != len(set(ids)):
            raise ValueError("seller ids must be unique")
        return self


class MultiSellerConfig(NegotiationConfig):
    """Inputs for a negotiation against the whole roster."""

    total_rounds: int = Field(default=6, ge=1, le=20)
    provider_variant: ProviderVariant | None = None


class SingleSellerConfig(NegotiationConfig):
    """Inputs for a negotiation against exactly one seller of the roster."""

    seller_id: str
    buyer_model: str | None = None
    seller_model: str | None = None
    total_rounds: int = Field(default=4, ge=1, le=20)
