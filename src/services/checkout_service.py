"""Checkout and order business logic service."""

import json
import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import stripe

from src.api.middleware.error_handler import ServiceUnavailableError
from src.core.config import get_settings
from src.core.stripe import get_stripe
from src.models.cart import BillingCycle, LineItem
from src.models.order import OrderStatus
from src.schemas.auth import UserContext
from src.services.address_service import AddressService
from src.services.cart_service import CartService
from src.services.errors import (
    AddressRequiredError,
    CheckoutSessionCreationError,
    EmptyCartError,
    InvalidAddressError,
    OrderNotFoundError,
    OrderPersistenceError,
)
from src.services.order_store import OrderStore
from src.services.pricing import period_unit_amount_cents, recurring_interval

logger = logging.getLogger(__name__)

# Allowed status changes. Anything else, e.g. expired arriving after paid,
# is ignored so out-of-order webhook deliveries cannot regress an order.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.PAID,
            OrderStatus.PAYMENT_FAILED,
            OrderStatus.EXPIRED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.PAYMENT_FAILED: frozenset(
        {OrderStatus.PAID, OrderStatus.EXPIRED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PAID: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.EXPIRED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

_ADDRESS_SNAPSHOT_FIELDS = ("label", "line1", "line2", "city", "postal_code", "state", "country")


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Check whether an order may move from current to new status."""
    return new in ALLOWED_TRANSITIONS[current]


def build_checkout_line_items(
    items: list[LineItem],
    billing_cycle: BillingCycle | str,
    currency: str,
) -> tuple[list[dict[str, Any]], int]:
    """Map cart line items to Stripe Checkout recurring line items.

    Each line is charged once per billing period. Amounts are rounded to
    whole minor units per line, the same way Stripe charges them.

    Args:
        items: Cart line items.
        billing_cycle: Selected billing cycle.
        currency: ISO currency code.

    Returns:
        tuple: (stripe_line_items, total_cents) where total_cents is the
            amount charged per billing period.
    """
    cycle = BillingCycle(billing_cycle)
    interval = recurring_interval(cycle)
    line_items: list[dict[str, Any]] = []
    total_cents = 0

    for item in items:
        unit_amount = period_unit_amount_cents(item, cycle)
        line_items.append(
            {
                "price_data": {
                    "currency": currency,
                    "product_data": {
                        "name": item["name"],
                        "description": f"{item['item_type']} - {cycle.value} billing",
                    },
                    "unit_amount": unit_amount,
                    "recurring": {"interval": interval},
                },
                "quantity": item["quantity"],
            }
        )
        total_cents += unit_amount * item["quantity"]

    return line_items, total_cents


def status_for_event(event: dict[str, Any]) -> OrderStatus | None:
    """Translate a Stripe checkout event into an order status.

    Returns:
        OrderStatus | None: The status to apply, or None for events that
            do not change order status.
    """
    event_type = event.get("type", "")
    session = event.get("data", {}).get("object", {})

    if event_type == "checkout.session.completed":
        # Delayed payment methods complete the session before funds arrive
        if session.get("payment_status") == "paid":
            return OrderStatus.PAID
        return OrderStatus.PENDING
    if event_type == "checkout.session.async_payment_succeeded":
        return OrderStatus.PAID
    if event_type == "checkout.session.async_payment_failed":
        return OrderStatus.PAYMENT_FAILED
    if event_type == "checkout.session.expired":
        return OrderStatus.EXPIRED
    return None


class CheckoutService:
    """Service for Stripe checkout and order status reconciliation."""

    def __init__(
        self,
        cart_service: CartService | None = None,
        order_store: OrderStore | None = None,
        address_service: AddressService | None = None,
    ) -> None:
        """Initialize checkout service with its collaborators."""
        self.stripe = get_stripe()
        self.settings = get_settings()
        self.cart_service = cart_service or CartService()
        self.order_store = order_store or OrderStore()
        self.address_service = address_service or AddressService()

    async def _billing_address_snapshot(
        self,
        address_id: UUID | None,
        user: UserContext | None,
    ) -> dict[str, Any] | None:
        if address_id is None:
            return None
        if user is None:
            raise AddressRequiredError()

        address = await self.address_service.get_address(address_id, user.user_id)
        if not address:
            raise InvalidAddressError()

        return {field: address.get(field) for field in _ADDRESS_SNAPSHOT_FIELDS}

    async def create_checkout_session(
        self,
        session_id: str,
        user: UserContext | None = None,
        address_id: UUID | None = None,
        customer_email: str | None = None,
    ) -> dict[str, Any]:
        """Create a Stripe subscription Checkout Session for the session's cart.

        The order row is written only after Stripe accepted the session, so
        a failed Stripe call leaves no local trace. A failed order write
        after a successful Stripe call leaves an orphaned Stripe session,
        which is logged with its id.

        Args:
            session_id: The cart session identifier.
            user: Authenticated user, if any.
            address_id: Optional saved billing address of the user.
            customer_email: Optional pre-fill email; defaults to the user's email.

        Returns:
            dict: Contains checkout_url, order_id, stripe_session_id.

        Raises:
            EmptyCartError: If the cart has no line items.
            ServiceUnavailableError: If Stripe is not configured.
            AddressRequiredError: If address_id is given without a logged-in user.
            InvalidAddressError: If the address does not belong to the user.
            CheckoutSessionCreationError: If the Stripe call fails.
            OrderPersistenceError: If the order cannot be stored.
        """
        cart = await self.cart_service.get_or_create_cart(session_id)
        items: list[LineItem] = cart.get("items") or []
        if not items:
            raise EmptyCartError()

        if not self.settings.stripe_secret_key:
            raise ServiceUnavailableError("checkout not available")

        billing_address = await self._billing_address_snapshot(address_id, user)
        email = customer_email or (user.email if user else None)
        billing_cycle = BillingCycle(cart.get("billing_cycle") or BillingCycle.MONTHLY)

        line_items, total_cents = build_checkout_line_items(
            items, billing_cycle, self.settings.stripe_currency
        )

        checkout_params: dict[str, Any] = {
            "mode": "subscription",
            "line_items": line_items,
            "success_url": self.settings.checkout_success_url,
            "cancel_url": self.settings.checkout_cancel_url,
            "metadata": {
                "cart_session_id": session_id,
                "address_id": str(address_id) if address_id else "",
            },
        }
        if email:
            checkout_params["customer_email"] = email

        try:
            stripe_session = self.stripe.checkout.Session.create(**checkout_params)
        except stripe.StripeError as e:
            logger.error("Stripe error creating checkout session: %s", str(e))
            raise CheckoutSessionCreationError() from e

        order_data = {
            "cart_id": str(cart["id"]),
            "session_id": session_id,
            "user_id": str(user.user_id) if user else None,
            "stripe_session_id": stripe_session.id,
            "customer_email": email,
            "items": [dict(item) for item in items],
            "billing_cycle": billing_cycle.value,
            "billing_address": billing_address,
            "total_cents": total_cents,
            "currency": self.settings.stripe_currency,
            "status": OrderStatus.PENDING.value,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            order = self.order_store.create_order(order_data)
        except Exception as e:
            logger.error(
                "Failed to store order for Stripe session %s, session left orphaned: %s",
                stripe_session.id,
                str(e),
            )
            raise OrderPersistenceError(stripe_session.id) from e

        logger.info(
            "Created order %s for Stripe session %s (%s, %d cents)",
            order["id"],
            stripe_session.id,
            billing_cycle.value,
            total_cents,
        )

        return {
            "checkout_url": stripe_session.url,
            "order_id": str(order["id"]),
            "stripe_session_id": stripe_session.id,
        }

    async def handle_payment_notification(
        self,
        stripe_session_id: str,
        status: OrderStatus | str,
        paid_at: datetime | None = None,
    ) -> dict[str, Any]:
        """Apply a payment status reported by a webhook to its order.

        Repeating the current status is a no-op. Transitions outside
        ALLOWED_TRANSITIONS are logged and ignored.

        Args:
            stripe_session_id: Stripe Checkout Session ID of the order.
            status: New order status.
            paid_at: When payment succeeded; defaults to now for paid.

        Returns:
            dict: The order after the update (or unchanged).

        Raises:
            OrderNotFoundError: If no order matches the Stripe session.
        """
        new_status = OrderStatus(status)

        order = self.order_store.find_order_by_stripe_session_id(stripe_session_id)
        if not order:
            raise OrderNotFoundError(stripe_session_id)

        current_status = OrderStatus(order["status"])
        if current_status == new_status:
            logger.debug("Order %s already %s", order["id"], new_status.value)
            return order

        if not can_transition(current_status, new_status):
            logger.warning(
                "Ignoring status change %s -> %s for order %s",
                current_status.value,
                new_status.value,
                order["id"],
            )
            return order

        paid_at_value = None
        if new_status == OrderStatus.PAID:
            paid_at_value = (paid_at or datetime.now(timezone.utc)).isoformat()

        updated = self.order_store.update_order_status(order["id"], new_status.value, paid_at_value)
        logger.info(
            "Order %s status %s -> %s",
            order["id"],
            current_status.value,
            new_status.value,
        )

        if updated:
            return updated
        return {**order, "status": new_status.value, "paid_at": paid_at_value or order.get("paid_at")}

    async def get_orders_for_session(self, session_id: str) -> list[dict[str, Any]]:
        """Get all orders placed from a cart session."""
        return self.order_store.list_orders_for_session(session_id)

    def verify_webhook_signature(
        self, payload: bytes, sig_header: str
    ) -> dict[str, Any]:
        """Verify Stripe webhook signature and return event.

        Args:
            payload: Raw webhook payload bytes.
            sig_header: Stripe-Signature header value.

        Returns:
            dict: Verified Stripe event.

        Raises:
            ValueError: If signature is invalid or Stripe not configured.
        """
        if not self.settings.stripe_webhook_secret:
            raise ValueError("Stripe webhook secret is not configured. Please set STRIPE_WEBHOOK_SECRET environment variable.")

        try:
            self.stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"), sig_header, self.settings.stripe_webhook_secret
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise ValueError("Invalid webhook signature") from e

        try:
            event: dict[str, Any] = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.warning("Webhook payload is not valid JSON: %s", str(e))
            raise ValueError("Invalid webhook payload") from e

        expected_version = self.settings.stripe_api_version
        if expected_version and event.get("api_version") != expected_version:
            logger.warning(
                "Webhook API version %s differs from configured %s",
                event.get("api_version"),
                expected_version,
            )

        return event
