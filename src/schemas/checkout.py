"""Checkout and order Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.cart import BillingCycle
from src.models.order import OrderStatus
from src.schemas.cart import LineItemSchema


class CheckoutRequest(BaseModel):
    """Schema for creating a checkout session via POST /checkout."""

    model_config = ConfigDict(from_attributes=True)

    address_id: UUID | None = Field(default=None, description="Saved billing address (requires login)")
    customer_email: str | None = Field(default=None, description="Pre-fill customer email")


class CheckoutResponse(BaseModel):
    """Schema for checkout session creation response."""

    model_config = ConfigDict(from_attributes=True)

    url: str = Field(description="Stripe Checkout URL to redirect to")
    order_id: str = Field(description="Created order identifier")
    stripe_session_id: str = Field(description="Stripe Checkout Session ID")


class OrderResponse(BaseModel):
    """Schema for order API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Order unique identifier")
    stripe_session_id: str = Field(description="Stripe Checkout Session ID")
    status: OrderStatus = Field(description="Order status")
    items: list[LineItemSchema] = Field(description="Line items charged")
    billing_cycle: BillingCycle = Field(description="Billing cycle charged")
    total_cents: int = Field(description="Total per billing period in minor units")
    currency: str = Field(default="eur", description="Currency code")
    customer_email: str | None = Field(default=None, description="Customer email")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    paid_at: datetime | None = Field(default=None, description="Payment timestamp")


class OrderListResponse(BaseModel):
    """Schema for order list API responses."""

    model_config = ConfigDict(from_attributes=True)

    items: list[OrderResponse] = Field(description="List of orders")
