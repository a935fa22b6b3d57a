"""Catalog schemas for hosting plans and add-ons."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Plan(BaseModel):
    """A hosting plan offered in the storefront."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Plan identifier")
    name: str = Field(description="Display name")
    monthly_price: Decimal = Field(description="Price per month")
    target_audience: str = Field(default="", description="Who the plan is aimed at")
    limits: str = Field(default="", description="Resource limits summary")
    features: tuple[str, ...] = Field(default=(), description="Feature bullet points")


class Addon(BaseModel):
    """An add-on product that can be attached to a cart once."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Add-on identifier")
    name: str = Field(description="Display name")
    monthly_price: Decimal = Field(description="Price per month")


class PlanListResponse(BaseModel):
    """Schema for plan list API responses."""

    plans: list[Plan] = Field(description="Available hosting plans")


class AddonListResponse(BaseModel):
    """Schema for add-on list API responses."""

    addons: list[Addon] = Field(description="Available add-ons")


class CatalogResponse(BaseModel):
    """Full static catalog."""

    plans: list[Plan] = Field(description="Available hosting plans")
    addons: list[Addon] = Field(description="Available add-ons")
    yearly_discount_months: int = Field(description="Free months per year for plans on yearly billing")
