"""Webhook API routes for Stripe payment notifications."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request, status

from src.services.checkout_service import CheckoutService, status_for_event
from src.services.errors import OrderNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

LOGGED_ONLY_EVENT_PREFIXES = ("customer.subscription.", "invoice.")


@router.post(
    "/stripe",
    status_code=status.HTTP_200_OK,
    summary="Handle Stripe webhooks",
    description="Receives Stripe events and updates order status. Requires a valid signature.",
)
async def stripe_webhook(request: Request) -> dict[str, str]:
    """Handle Stripe webhook events.

    Checkout session events move the matching order through its status
    lifecycle. Subscription and invoice events are logged only. Every
    verified event is acknowledged with 200, including events for unknown
    orders, so Stripe does not keep retrying them.

    Args:
        request: FastAPI request object for reading raw body and headers.

    Returns:
        dict: Acknowledgment message.

    Raises:
        HTTPException: 400 if the signature header is missing or invalid.
    """
    payload = await request.body()

    sig_header = request.headers.get("stripe-signature")
    if not sig_header:
        logger.warning("Missing Stripe-Signature header in webhook request")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Stripe-Signature header",
        )

    service = CheckoutService()

    try:
        event = service.verify_webhook_signature(payload, sig_header)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        ) from e

    event_type = event.get("type", "")
    logger.info("Processing Stripe webhook event %s (%s)", event.get("id"), event_type)

    new_status = status_for_event(event)
    if new_status is not None:
        session = event.get("data", {}).get("object", {})
        stripe_session_id = session.get("id", "")
        created = event.get("created")
        paid_at = datetime.fromtimestamp(created, tz=timezone.utc) if created else None

        try:
            await service.handle_payment_notification(stripe_session_id, new_status, paid_at)
        except OrderNotFoundError:
            logger.warning(
                "No order for Stripe session %s (event %s)",
                stripe_session_id,
                event_type,
            )

    elif event_type.startswith(LOGGED_ONLY_EVENT_PREFIXES):
        data_object = event.get("data", {}).get("object", {})
        logger.info("Stripe %s for %s", event_type, data_object.get("id"))

    else:
        logger.debug("Unhandled webhook event type: %s", event_type)

    return {"status": "received"}
