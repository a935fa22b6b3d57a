"""Hosting plan and add-on catalog API routes."""

from fastapi import APIRouter

from src.schemas.catalog import AddonListResponse, CatalogResponse, PlanListResponse
from src.services.catalog_service import list_addons, list_plans
from src.services.pricing import YEARLY_DISCOUNT_MONTHS

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get(
    "",
    response_model=CatalogResponse,
    summary="Get the full catalog",
    description="Returns all plans and add-ons. No authentication required.",
)
async def get_catalog() -> CatalogResponse:
    """Get plans, add-ons and the yearly billing discount."""
    return CatalogResponse(
        plans=list_plans(),
        addons=list_addons(),
        yearly_discount_months=YEARLY_DISCOUNT_MONTHS,
    )


@router.get(
    "/plans",
    response_model=PlanListResponse,
    summary="List hosting plans",
)
async def get_plans() -> PlanListResponse:
    """List hosting plans, cheapest first."""
    return PlanListResponse(plans=list_plans())


@router.get(
    "/addons",
    response_model=AddonListResponse,
    summary="List add-ons",
)
async def get_addons() -> AddonListResponse:
    return AddonListResponse(addons=list_addons())
