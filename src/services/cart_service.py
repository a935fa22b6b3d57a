"""Cart business logic service."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from src.models.cart import BillingCycle, ItemType
from src.services.cart_store import CartStore
from src.services.catalog_service import lookup_addon, lookup_plan
from src.services.errors import (
    CartConflictError,
    InvalidAddonError,
    InvalidBillingCycleError,
    InvalidPlanError,
)
from src.services.pricing import compute_totals

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CartService:
    """Service for session-scoped shopping carts.

    Every mutating operation loads (or lazily creates) the session's cart,
    applies the change and writes the whole cart back. The write is
    conditional on the cart being unchanged since it was read; a lost race
    is retried once on a fresh read.
    """

    MAX_WRITE_ATTEMPTS = 2

    def __init__(self, store: CartStore | None = None) -> None:
        """Initialize cart service.

        Args:
            store: Cart persistence; defaults to the Supabase-backed store.
        """
        self.store = store or CartStore()

    def _load_or_create(self, session_id: str) -> dict[str, Any]:
        cart = self.store.find_cart(session_id)
        if cart is not None:
            cart["items"] = list(cart.get("items") or [])
            return cart

        now = _now()
        cart = self.store.create_cart(
            {
                "session_id": session_id,
                "items": [],
                "billing_cycle": BillingCycle.MONTHLY.value,
                "created_at": now,
                "updated_at": now,
            }
        )
        cart["items"] = list(cart.get("items") or [])
        logger.info("Created cart %s for session", cart.get("id"))
        return cart

    async def _mutate(
        self,
        session_id: str,
        mutation: Callable[[dict[str, Any]], bool],
    ) -> dict[str, Any]:
        """Run a read-modify-write cycle on the session's cart.

        ``mutation`` edits the cart in place and returns whether anything
        changed. Unchanged carts are not written back.

        Raises:
            CartConflictError: If every attempt lost a race with another writer.
        """
        for attempt in range(1, self.MAX_WRITE_ATTEMPTS + 1):
            cart = self._load_or_create(session_id)
            if not mutation(cart):
                return cart

            read_at = cart["updated_at"]
            cart["updated_at"] = _now()
            try:
                self.store.replace_cart(cart, expected_updated_at=read_at)
                return cart
            except CartConflictError:
                if attempt == self.MAX_WRITE_ATTEMPTS:
                    raise
                logger.warning("Cart %s changed during update, retrying", cart.get("id"))

        raise CartConflictError(session_id)

    async def get_or_create_cart(self, session_id: str) -> dict[str, Any]:
        """Get the session's cart, creating an empty monthly cart if none exists.

        Args:
            session_id: The cart session identifier.

        Returns:
            dict: The cart row.
        """
        return self._load_or_create(session_id)

    async def add_plan(self, session_id: str, plan_id: str, quantity: int = 1) -> dict[str, Any]:
        """Add a hosting plan, accumulating quantity if it is already in the cart.

        Args:
            session_id: The cart session identifier.
            plan_id: Catalog plan id.
            quantity: Amount to add; values below 1 are treated as 1.

        Returns:
            dict: The updated cart.

        Raises:
            InvalidPlanError: If plan_id is not in the catalog.
        """
        plan = lookup_plan(plan_id)
        if plan is None:
            raise InvalidPlanError(plan_id)
        quantity = max(quantity, 1)

        def mutation(cart: dict[str, Any]) -> bool:
            for item in cart["items"]:
                if item["item_type"] == ItemType.PLAN.value and item["item_id"] == plan_id:
                    item["quantity"] += quantity
                    return True

            cart["items"].append(
                {
                    "item_id": plan.id,
                    "item_type": ItemType.PLAN.value,
                    "name": plan.name,
                    "price": str(plan.monthly_price),
                    "quantity": quantity,
                }
            )
            return True

        cart = await self._mutate(session_id, mutation)
        logger.debug("Added plan %s x%d to cart %s", plan_id, quantity, cart.get("id"))
        return cart

    async def add_addon(self, session_id: str, addon_id: str) -> dict[str, Any]:
        """Add an add-on. Adding one that is already present changes nothing.

        Raises:
            InvalidAddonError: If addon_id is not in the catalog.
        """
        addon = lookup_addon(addon_id)
        if addon is None:
            raise InvalidAddonError(addon_id)

        def mutation(cart: dict[str, Any]) -> bool:
            for item in cart["items"]:
                if item["item_type"] == ItemType.ADDON.value and item["item_id"] == addon_id:
                    return False

            cart["items"].append(
                {
                    "item_id": addon.id,
                    "item_type": ItemType.ADDON.value,
                    "name": addon.name,
                    "price": str(addon.monthly_price),
                    "quantity": 1,
                }
            )
            return True

        return await self._mutate(session_id, mutation)

    async def set_item_quantity(self, session_id: str, item_id: str, quantity: int) -> dict[str, Any]:
        """Set the quantity of a line item.

        A quantity of 0 or less removes the item. An unknown item_id is a
        successful no-op.

        Args:
            session_id: The cart session identifier.
            item_id: Catalog id of the line item.
            quantity: New quantity.

        Returns:
            dict: The (possibly unchanged) cart.
        """
        if quantity <= 0:
            return await self.remove_item(session_id, item_id)

        def mutation(cart: dict[str, Any]) -> bool:
            for item in cart["items"]:
                if item["item_id"] == item_id:
                    item["quantity"] = quantity
                    return True
            return False

        return await self._mutate(session_id, mutation)

    async def remove_item(self, session_id: str, item_id: str) -> dict[str, Any]:
        """Remove every line item with item_id, whatever its type.

        Removing an item that is not in the cart is not an error.
        """

        def mutation(cart: dict[str, Any]) -> bool:
            remaining = [item for item in cart["items"] if item["item_id"] != item_id]
            changed = len(remaining) != len(cart["items"])
            cart["items"] = remaining
            return changed

        return await self._mutate(session_id, mutation)

    async def set_billing_cycle(self, session_id: str, cycle: str) -> dict[str, Any]:
        """Select monthly or yearly billing.

        Raises:
            InvalidBillingCycleError: If cycle is not monthly or yearly.
        """
        try:
            billing_cycle = BillingCycle(cycle)
        except ValueError as e:
            raise InvalidBillingCycleError(str(cycle)) from e

        def mutation(cart: dict[str, Any]) -> bool:
            if cart.get("billing_cycle") == billing_cycle.value:
                return False
            cart["billing_cycle"] = billing_cycle.value
            return True

        cart = await self._mutate(session_id, mutation)
        logger.debug("Cart %s billing cycle set to %s", cart.get("id"), billing_cycle.value)
        return cart

    @staticmethod
    def get_cart_totals(cart: dict[str, Any]) -> tuple[Decimal, Decimal]:
        """Monthly and yearly totals of a cart, computed on read."""
        return compute_totals(cart.get("items") or [])
