"""Shopping cart API routes.

Carts are keyed by the anonymous cart session id, never by user.
"""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from src.api.deps import CartSession
from src.api.middleware.error_handler import BadRequestError
from src.schemas.cart import (
    AddAddonRequest,
    AddPlanRequest,
    CartResponse,
    CartSchema,
    SetBillingCycleRequest,
    UpdateItemRequest,
)
from src.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(cart: dict[str, Any]) -> CartResponse:
    monthly_total, yearly_total = CartService.get_cart_totals(cart)
    return CartResponse(
        cart=CartSchema(**cart),
        monthly_total=monthly_total,
        yearly_total=yearly_total,
    )


@router.get(
    "",
    response_model=CartResponse,
    summary="Get current cart",
    description="Returns the session's cart, creating an empty one on first access.",
)
async def get_cart(session_id: CartSession) -> CartResponse:
    """Get the session's cart with its totals.

    Args:
        session_id: Cart session id (issued if absent).

    Returns:
        CartResponse: Cart plus monthly and yearly totals.
    """
    service = CartService()
    cart = await service.get_or_create_cart(session_id)
    return _cart_response(cart)


@router.post(
    "/plan",
    response_model=CartResponse,
    summary="Add a hosting plan",
)
async def add_plan(data: AddPlanRequest, session_id: CartSession) -> CartResponse:
    """Add a plan to the cart, accumulating quantity if already present.

    Raises:
        HTTPException: 400 if the plan id is unknown.
    """
    service = CartService()

    try:
        cart = await service.add_plan(session_id, data.plan_id, data.quantity)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return _cart_response(cart)


@router.post(
    "/addon",
    response_model=CartResponse,
    summary="Add an add-on",
)
async def add_addon(data: AddAddonRequest, session_id: CartSession) -> CartResponse:
    """Add an add-on to the cart. Adding it twice keeps a single line.

    Raises:
        HTTPException: 400 if the add-on id is unknown.
    """
    service = CartService()

    try:
        cart = await service.add_addon(session_id, data.addon_id)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return _cart_response(cart)


@router.put(
    "/items/{item_id}",
    response_model=CartResponse,
    summary="Set line item quantity",
    description="A quantity of 0 or less removes the item. Unknown ids leave the cart unchanged.",
)
async def update_item(
    item_id: str,
    data: UpdateItemRequest,
    session_id: CartSession,
) -> CartResponse:
    service = CartService()
    cart = await service.set_item_quantity(session_id, item_id, data.quantity)
    return _cart_response(cart)


@router.delete(
    "/items/{item_id}",
    response_model=CartResponse,
    summary="Remove a line item",
)
async def remove_item(item_id: str, session_id: CartSession) -> CartResponse:
    service = CartService()
    cart = await service.remove_item(session_id, item_id)
    return _cart_response(cart)


@router.post(
    "/billing-cycle",
    response_model=CartResponse,
    summary="Select billing cycle",
)
async def set_billing_cycle(data: SetBillingCycleRequest, session_id: CartSession) -> CartResponse:
    """Switch the cart between monthly and yearly billing.

    Raises:
        HTTPException: 400 if the cycle is neither monthly nor yearly.
    """
    service = CartService()

    try:
        cart = await service.set_billing_cycle(session_id, data.billing_cycle)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return _cart_response(cart)
