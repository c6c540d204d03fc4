"""
Admin API - FastAPI router for team item management.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from ..engine.models import (
    DEFAULT_BASE_PRICE,
    DEFAULT_MIN_PRICE,
    DEFAULT_STEP_PERCENT,
    DEFAULT_STEP_EVERY,
    DEFAULT_MAX_DISCOUNT_PERCENT,
)
from ..services.team_items_service import TeamItemsService
from .state import get_service

router = APIRouter(prefix="/api/admin/team-items", tags=["admin"])


# Pydantic models for API
class TeamItemCreate(BaseModel):
    """Request model for creating a team item."""
    model_config = ConfigDict(allow_inf_nan=False)

    title: str
    slug: str
    description: Optional[str] = None
    tags: list[str] = []
    cover_image_url: Optional[str] = None
    is_active: bool = True
    base_price: float = DEFAULT_BASE_PRICE
    min_price: float = DEFAULT_MIN_PRICE
    discount_step_percent: float = DEFAULT_STEP_PERCENT
    discount_step_every: int = DEFAULT_STEP_EVERY
    max_discount_percent: float = DEFAULT_MAX_DISCOUNT_PERCENT


class TeamItemUpdate(BaseModel):
    """Request model for updating a team item."""
    model_config = ConfigDict(allow_inf_nan=False)

    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    cover_image_url: Optional[str] = None
    is_active: Optional[bool] = None
    base_price: Optional[float] = None
    min_price: Optional[float] = None
    discount_step_percent: Optional[float] = None
    discount_step_every: Optional[int] = None
    max_discount_percent: Optional[float] = None


class ValidationResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


# Endpoints

@router.get("")
async def list_all_items(service: TeamItemsService = Depends(get_service)):
    """List all items, including inactive ones."""
    return {"ok": True, "items": [i.to_dict() for i in service.list_items(active_only=False)]}


@router.post("", status_code=201)
async def create_item(item_data: TeamItemCreate, service: TeamItemsService = Depends(get_service)):
    """Create a new team item."""
    created = service.create_item(item_data.model_dump())
    return {"ok": True, "item": created.to_dict()}


@router.put("/{slug}")
async def update_item(slug: str, updates: TeamItemUpdate, service: TeamItemsService = Depends(get_service)):
    """Update an existing team item."""
    # Only fields present in the body are applied
    updated = service.update_item(slug, updates.model_dump(exclude_unset=True))
    return {"ok": True, "item": updated.to_dict()}


@router.post("/validate", response_model=ValidationResponse)
async def validate_item(item_data: TeamItemCreate, service: TeamItemsService = Depends(get_service)):
    """Validate an item without saving."""
    result = service.validate_item(item_data.model_dump())
    return ValidationResponse(valid=result.valid, errors=result.errors, warnings=result.warnings)
