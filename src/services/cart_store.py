"""Supabase persistence for carts.

Whole-cart replacement is the unit of persistence; there is no partial
update of individual line items.
"""

from typing import Any

from src.core.supabase import get_supabase_client
from src.models.cart import Cart, CartCreate
from src.services.errors import CartConflictError


class CartStore:
    """Reads and writes rows of the carts table."""

    TABLE = "carts"

    def __init__(self) -> None:
        """Initialize cart store with Supabase client."""
        self.client = get_supabase_client()

    def find_cart(self, session_id: str) -> Cart | None:
        """Get the cart for a session.

        Args:
            session_id: The cart session identifier.

        Returns:
            dict | None: The cart row or None if the session has no cart.
        """
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("session_id", session_id)
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    def create_cart(self, cart: CartCreate) -> Cart:
        """Insert a new cart and return it with its generated id."""
        response = self.client.table(self.TABLE).insert(cart).execute()
        return response.data[0]

    def replace_cart(self, cart: dict[str, Any], expected_updated_at: str) -> None:
        """Overwrite the mutable fields of an existing cart.

        The update only matches while the stored ``updated_at`` still equals
        the value the caller read, so a concurrent write is detected instead
        of silently overwritten.

        Args:
            cart: Full cart row including its id and new ``updated_at``.
            expected_updated_at: The ``updated_at`` value the cart was read with.

        Raises:
            CartConflictError: If the row changed since it was read.
        """
        response = (
            self.client.table(self.TABLE)
            .update(
                {
                    "items": cart["items"],
                    "billing_cycle": cart["billing_cycle"],
                    "updated_at": cart["updated_at"],
                }
            )
            .eq("id", str(cart["id"]))
            .eq("updated_at", expected_updated_at)
            .execute()
        )

        if not response.data:
            raise CartConflictError(cart["session_id"])
