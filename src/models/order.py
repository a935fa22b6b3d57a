"""Order model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict

from src.models.cart import LineItem


class OrderStatus(str, Enum):
    """Payment status of an order, driven by payment webhooks."""

    PENDING = "pending"
    PAID = "paid"
    PAYMENT_FAILED = "payment_failed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class BillingAddressSnapshot(TypedDict, total=False):
    """Copy of the address chosen at checkout, stored with the order."""

    label: str
    line1: str
    line2: str | None
    city: str
    postal_code: str
    state: str | None
    country: str


class Order(TypedDict):
    """Order table row representation.

    Items, billing_cycle and total_cents are written once at checkout.
    Only status and paid_at change afterwards.
    """

    id: str
    cart_id: str
    session_id: str
    user_id: str | None
    stripe_session_id: str
    customer_email: str | None
    items: list[LineItem]
    billing_cycle: str
    billing_address: BillingAddressSnapshot | None
    total_cents: int
    currency: str
    status: str
    created_at: datetime
    paid_at: datetime | None


class OrderUpdate(TypedDict, total=False):
    """Data that can be updated on an order.

    Used when applying webhook status changes.
    """

    status: str
    paid_at: str
