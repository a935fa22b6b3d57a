"""Domain errors raised by the cart, checkout and address services."""

from fastapi import status

from src.api.middleware.error_handler import APIError, BadRequestError, NotFoundError


class InvalidPlanError(BadRequestError):
    """Plan id is not in the catalog."""

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"invalid plan ID: {plan_id}")
        self.plan_id = plan_id


class InvalidAddonError(BadRequestError):
    """Add-on id is not in the catalog."""

    def __init__(self, addon_id: str) -> None:
        super().__init__(f"invalid addon ID: {addon_id}")
        self.addon_id = addon_id


class InvalidBillingCycleError(BadRequestError):
    """Billing cycle is neither monthly nor yearly."""

    def __init__(self, cycle: str) -> None:
        super().__init__(f"invalid billing cycle: {cycle}")
        self.cycle = cycle


class EmptyCartError(BadRequestError):
    """Checkout was requested for a cart without line items."""

    def __init__(self) -> None:
        super().__init__("cart is empty")


class AddressRequiredError(BadRequestError):
    """A billing address was referenced without an authenticated user."""

    def __init__(self) -> None:
        super().__init__("login required to use a saved address")


class InvalidAddressError(BadRequestError):
    """Referenced address does not exist or belongs to someone else."""

    def __init__(self) -> None:
        super().__init__("address not found or does not belong to user")


class AddressNotFoundError(NotFoundError):
    """Address lookup by id and owner found nothing."""

    def __init__(self) -> None:
        super().__init__("Address not found")


class OrderNotFoundError(NotFoundError):
    """No order matches the payment provider session id."""

    def __init__(self, stripe_session_id: str) -> None:
        super().__init__(f"order not found for checkout session {stripe_session_id}")
        self.stripe_session_id = stripe_session_id


class CheckoutSessionCreationError(APIError):
    """The payment provider rejected or failed the checkout session request."""

    def __init__(self, message: str = "failed to create checkout session") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type="checkout_session_failed",
        )


class OrderPersistenceError(APIError):
    """The order snapshot could not be written after the checkout session was created."""

    def __init__(self, stripe_session_id: str) -> None:
        super().__init__(
            message="failed to create order",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type="order_persistence_failed",
        )
        self.stripe_session_id = stripe_session_id


class CartConflictError(APIError):
    """The cart changed between read and write and the retry lost too."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            message="cart was modified concurrently, please retry",
            status_code=status.HTTP_409_CONFLICT,
            error_type="cart_conflict",
        )
        self.session_id = session_id
