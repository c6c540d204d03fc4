"""
Team Items API - public routes for browsing and joining group-buy items.

Clients poll the count endpoint for fresh participant numbers; a price
shown between polls may lag concurrent joins.
"""
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..engine.models import PricingParameters
from ..engine.pricing_engine import compute_pricing_progress, explain_pricing
from ..services.team_items_service import TeamItemsService
from .state import get_service

router = APIRouter(prefix="/api/team-items", tags=["team-items"])
pricing_router = APIRouter(prefix="/api/pricing", tags=["pricing"])


# Pydantic models for API
class JoinRequest(BaseModel):
    """Request model for joining an item."""
    local_user_id: Optional[str] = None


class CountResponse(BaseModel):
    participant_count: int


class PreviewRequest(BaseModel):
    """Pricing parameters plus a participant count, camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    base_price: float = Field(alias="basePrice", ge=0)
    min_price: float = Field(0, alias="minPrice", ge=0)
    discount_step_percent: float = Field(1, alias="discountStepPercent")
    discount_step_every: int = Field(1, alias="discountStepEvery")
    max_discount_percent: float = Field(0, alias="maxDiscountPercent", ge=0)
    # participants is the older key; participantCount wins when both are sent
    participant_count: int = Field(
        0,
        validation_alias=AliasChoices("participantCount", "participants", "participant_count"),
        ge=0,
    )

    def to_parameters(self) -> PricingParameters:
        return PricingParameters(
            base_price=self.base_price,
            min_price=self.min_price,
            discount_step_percent=self.discount_step_percent,
            discount_step_every=self.discount_step_every,
            max_discount_percent=self.max_discount_percent,
        )


# Endpoints

@router.get("")
async def list_items(service: TeamItemsService = Depends(get_service)):
    """List active items with their live price."""
    quotes = service.quote_all(active_only=True)
    return {
        "ok": True,
        "items": [
            {**q.item.to_dict(), "participants": q.participants, "final_price": q.final_price}
            for q in quotes
        ],
    }


@router.get("/{slug}")
async def get_item(slug: str, service: TeamItemsService = Depends(get_service)):
    """Item detail with live participant count and final price."""
    quote = service.quote(slug)
    return {
        "ok": True,
        "item": quote.item.to_dict(),
        "participants": quote.participants,
        "finalPrice": quote.final_price,
    }


@router.get("/{slug}/count", response_model=CountResponse)
async def get_count(slug: str, service: TeamItemsService = Depends(get_service)):
    """Live participant count (polled by the detail view)."""
    item = service.require_item(slug)
    return CountResponse(participant_count=service.count_participants(item.id))


@router.post("/{slug}/join", response_model=CountResponse)
async def join_item(
    slug: str,
    req: Optional[JoinRequest] = None,
    service: TeamItemsService = Depends(get_service),
):
    """Join an item; repeated joins by the same user are ignored."""
    user_id = req.local_user_id if req else None
    return CountResponse(participant_count=service.join(slug, user_id))


@router.get("/{slug}/pricing")
async def get_pricing(slug: str, service: TeamItemsService = Depends(get_service)):
    """Progress toward the next discount step, with an explanation trace."""
    item, progress = service.progress(slug)
    trace = explain_pricing(item.pricing, progress.participant_count)
    return {
        "ok": True,
        "slug": item.slug,
        "pricing": progress.to_dict(),
        "trace": [asdict(t) for t in trace],
    }


@pricing_router.post("/preview")
async def preview_pricing(req: PreviewRequest):
    """Price arbitrary parameters without touching storage."""
    return compute_pricing_progress(req.to_parameters(), req.participant_count).to_dict()
