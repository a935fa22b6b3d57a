"""Cart Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from src.models.cart import BillingCycle, ItemType


class LineItemSchema(BaseModel):
    """Schema for a single line item in a cart or order."""

    model_config = ConfigDict(from_attributes=True)

    item_id: str = Field(description="Catalog identifier")
    item_type: ItemType = Field(description="plan or addon")
    name: str = Field(description="Display name")
    price: Decimal = Field(description="Monthly unit price")
    quantity: int = Field(ge=1, description="Quantity")


class CartSchema(BaseModel):
    """Schema for a persisted cart."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = Field(default=None, description="Cart identifier")
    session_id: str = Field(description="Session the cart belongs to")
    items: list[LineItemSchema] = Field(default_factory=list, description="Line items")
    billing_cycle: BillingCycle = Field(description="Selected billing cycle")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last modification timestamp")


class CartResponse(BaseModel):
    """Schema for every cart endpoint response."""

    cart: CartSchema = Field(description="The session's cart")
    monthly_total: Decimal = Field(description="Monthly-equivalent total")
    yearly_total: Decimal = Field(description="Annual total with the yearly plan discount applied")


class AddPlanRequest(BaseModel):
    """Schema for POST /cart/plan."""

    plan_id: str = Field(description="Plan identifier")
    quantity: int = Field(default=1, description="Quantity to add; values below 1 count as 1")


class AddAddonRequest(BaseModel):
    """Schema for POST /cart/addon."""

    addon_id: str = Field(description="Add-on identifier")


class UpdateItemRequest(BaseModel):
    """Schema for PUT /cart/items/{item_id}."""

    quantity: int = Field(description="New quantity; 0 or less removes the item")


class SetBillingCycleRequest(BaseModel):
    """Schema for POST /cart/billing-cycle."""

    billing_cycle: str = Field(description="monthly or yearly")
