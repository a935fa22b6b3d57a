"""Cart model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict


class ItemType(str, Enum):
    """Kind of catalog entry a line item refers to."""

    PLAN = "plan"
    ADDON = "addon"


class BillingCycle(str, Enum):
    """Charging cadence selected for a cart or order."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class LineItem(TypedDict):
    """Structure for a single line item in a cart or order.

    Stored as part of the items JSONB array. ``price`` is the monthly
    unit price serialized as a decimal string.
    """

    item_id: str
    item_type: str
    name: str
    price: str
    quantity: int


class Cart(TypedDict):
    """Cart table row representation.

    One cart per session_id. The items array never holds two entries
    with the same (item_id, item_type) pair.
    """

    id: str
    session_id: str
    items: list[LineItem]
    billing_cycle: str
    created_at: datetime
    updated_at: datetime


class CartCreate(TypedDict, total=False):
    """Data required to create a new cart."""

    session_id: str
    items: list[LineItem]
    billing_cycle: str
    created_at: str
    updated_at: str
