"""Checkout API routes for Stripe integration."""

from fastapi import APIRouter, HTTPException, status

from src.api.deps import CartSession, OptionalUser
from src.api.middleware.error_handler import BadRequestError
from src.schemas.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    OrderListResponse,
    OrderResponse,
)
from src.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Stripe Checkout Session",
    description=(
        "Creates a Stripe subscription Checkout Session for the session's cart and a "
        "pending order. Login is only needed to attach a saved billing address."
    ),
)
async def create_checkout(
    session_id: CartSession,
    user: OptionalUser,
    data: CheckoutRequest | None = None,
) -> CheckoutResponse:
    """Create a Stripe Checkout Session for the current cart.

    The frontend should redirect to the returned url.

    Args:
        session_id: Cart session id.
        user: Authenticated user, if a bearer token was sent.
        data: Optional billing address and email.

    Returns:
        CheckoutResponse: Checkout url, order id and Stripe session id.

    Raises:
        HTTPException: 400 if the cart is empty or the address is invalid.
    """
    data = data or CheckoutRequest()
    service = CheckoutService()

    try:
        result = await service.create_checkout_session(
            session_id=session_id,
            user=user,
            address_id=data.address_id,
            customer_email=data.customer_email,
        )
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return CheckoutResponse(
        url=result["checkout_url"],
        order_id=result["order_id"],
        stripe_session_id=result["stripe_session_id"],
    )


# Orders router - mounted separately at /orders
orders_router = APIRouter(prefix="/orders", tags=["orders"])


@orders_router.get(
    "",
    response_model=OrderListResponse,
    summary="List my orders",
    description="Returns all orders placed from the current cart session, newest first.",
)
async def list_orders(session_id: CartSession) -> OrderListResponse:
    service = CheckoutService()
    orders = await service.get_orders_for_session(session_id)
    return OrderListResponse(items=[OrderResponse(**order) for order in orders])
