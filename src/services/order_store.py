"""Supabase persistence for orders."""

from typing import Any

from src.core.supabase import get_supabase_client
from src.models.order import Order, OrderUpdate


class OrderStore:
    """Reads and writes rows of the orders table."""

    TABLE = "orders"

    def __init__(self) -> None:
        """Initialize order store with Supabase client."""
        self.client = get_supabase_client()

    def create_order(self, order: dict[str, Any]) -> Order:
        """Insert an order snapshot and return it with its generated id."""
        response = self.client.table(self.TABLE).insert(order).execute()
        return response.data[0]

    def find_order_by_stripe_session_id(self, stripe_session_id: str) -> Order | None:
        """Get the order created for a Stripe Checkout Session.

        Args:
            stripe_session_id: Stripe Checkout Session ID (cs_...).

        Returns:
            dict | None: The order row or None if not found.
        """
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("stripe_session_id", stripe_session_id)
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    def update_order_status(
        self,
        order_id: str,
        status: str,
        paid_at: str | None = None,
    ) -> Order | None:
        """Set the status (and optionally paid_at) of an order.

        Returns:
            Order | None: The updated order row, or None if nothing matched.
        """
        update_data: OrderUpdate = {"status": status}
        if paid_at is not None:
            update_data["paid_at"] = paid_at

        response = (
            self.client.table(self.TABLE)
            .update(update_data)
            .eq("id", str(order_id))
            .execute()
        )

        return response.data[0] if response.data else None

    def list_orders_for_session(self, session_id: str) -> list[Order]:
        """Get all orders placed from a cart session, newest first."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("session_id", session_id)
            .order("created_at", desc=True)
            .execute()
        )

        return response.data or []
