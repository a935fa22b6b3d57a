"""Database model type definitions."""

from src.models.address import Address
from src.models.cart import BillingCycle, Cart, ItemType, LineItem
from src.models.order import Order, OrderStatus

__all__ = [
    "Address",
    "BillingCycle",
    "Cart",
    "ItemType",
    "LineItem",
    "Order",
    "OrderStatus",
]
