"""Unit tests for CartService."""

import itertools
from collections.abc import Callable
from decimal import Decimal

import pytest

from src.services.cart_service import CartService
from src.services.errors import (
    CartConflictError,
    InvalidAddonError,
    InvalidBillingCycleError,
    InvalidPlanError,
)
from tests.fakes import InMemoryCartStore

SESSION = "a" * 64


@pytest.fixture
def cart_service(cart_store: InMemoryCartStore) -> CartService:
    """Create CartService over an in-memory store."""
    return CartService(store=cart_store)


def item_ids(cart: dict) -> list[tuple[str, str]]:
    return [(item["item_type"], item["item_id"]) for item in cart["items"]]


class TestGetOrCreateCart:
    """Tests for get_or_create_cart."""

    @pytest.mark.asyncio
    async def test_creates_empty_monthly_cart(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        cart = await cart_service.get_or_create_cart(SESSION)

        assert cart["session_id"] == SESSION
        assert cart["items"] == []
        assert cart["billing_cycle"] == "monthly"
        assert cart["id"]
        assert SESSION in cart_store.carts

    @pytest.mark.asyncio
    async def test_returns_existing_cart(self, cart_service: CartService) -> None:
        first = await cart_service.get_or_create_cart(SESSION)
        second = await cart_service.get_or_create_cart(SESSION)

        assert first["id"] == second["id"]

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, cart_service: CartService) -> None:
        await cart_service.add_plan("session-1", "node-pro")

        other = await cart_service.get_or_create_cart("session-2")

        assert other["items"] == []


class TestAddPlan:
    """Tests for add_plan."""

    @pytest.mark.asyncio
    async def test_adds_plan_with_catalog_snapshot(self, cart_service: CartService) -> None:
        cart = await cart_service.add_plan(SESSION, "node-starter")

        assert cart["items"] == [
            {
                "item_id": "node-starter",
                "item_type": "plan",
                "name": "Node Starter",
                "price": "9.90",
                "quantity": 1,
            }
        ]

    @pytest.mark.asyncio
    async def test_accumulates_quantity(self, cart_service: CartService) -> None:
        await cart_service.add_plan(SESSION, "node-starter", 2)
        cart = await cart_service.add_plan(SESSION, "node-starter", 3)

        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -4])
    async def test_non_positive_quantity_counts_as_one(
        self, cart_service: CartService, quantity: int
    ) -> None:
        cart = await cart_service.add_plan(SESSION, "node-pro", quantity)

        assert cart["items"][0]["quantity"] == 1

    @pytest.mark.asyncio
    async def test_unknown_plan(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        with pytest.raises(InvalidPlanError, match="invalid plan ID: node-ultra"):
            await cart_service.add_plan(SESSION, "node-ultra")

        assert SESSION not in cart_store.carts

    @pytest.mark.asyncio
    async def test_persists_change(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        await cart_service.add_plan(SESSION, "static-micro")

        stored = cart_store.carts[SESSION]
        assert item_ids(stored) == [("plan", "static-micro")]
        assert stored["updated_at"] >= stored["created_at"]


class TestAddAddon:
    """Tests for add_addon."""

    @pytest.mark.asyncio
    async def test_adds_addon(self, cart_service: CartService) -> None:
        cart = await cart_service.add_addon(SESSION, "de-domain")

        assert cart["items"][0]["item_type"] == "addon"
        assert cart["items"][0]["price"] == "1.00"

    @pytest.mark.asyncio
    async def test_adding_twice_is_idempotent(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        await cart_service.add_addon(SESSION, "de-domain")
        writes = cart_store.replace_calls

        cart = await cart_service.add_addon(SESSION, "de-domain")

        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 1
        assert cart_store.replace_calls == writes

    @pytest.mark.asyncio
    async def test_unknown_addon(self, cart_service: CartService) -> None:
        with pytest.raises(InvalidAddonError):
            await cart_service.add_addon(SESSION, "com-domain")


class TestSetItemQuantity:
    """Tests for set_item_quantity."""

    @pytest.mark.asyncio
    async def test_sets_quantity(self, cart_service: CartService) -> None:
        await cart_service.add_plan(SESSION, "node-pro")

        cart = await cart_service.set_item_quantity(SESSION, "node-pro", 4)

        assert cart["items"][0]["quantity"] == 4

    @pytest.mark.asyncio
    async def test_zero_removes_item(self, cart_service: CartService) -> None:
        await cart_service.add_plan(SESSION, "node-pro")
        await cart_service.add_addon(SESSION, "de-domain")

        cart = await cart_service.set_item_quantity(SESSION, "node-pro", 0)

        assert item_ids(cart) == [("addon", "de-domain")]

    @pytest.mark.asyncio
    async def test_unknown_item_is_noop(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        await cart_service.add_plan(SESSION, "node-pro")
        writes = cart_store.replace_calls

        cart = await cart_service.set_item_quantity(SESSION, "missing", 3)

        assert item_ids(cart) == [("plan", "node-pro")]
        assert cart_store.replace_calls == writes


class TestRemoveItem:
    """Tests for remove_item."""

    @pytest.mark.asyncio
    async def test_removes_item(self, cart_service: CartService) -> None:
        await cart_service.add_plan(SESSION, "node-pro")

        cart = await cart_service.remove_item(SESSION, "node-pro")

        assert cart["items"] == []

    @pytest.mark.asyncio
    async def test_removing_missing_item_is_not_an_error(self, cart_service: CartService) -> None:
        cart = await cart_service.remove_item(SESSION, "node-pro")

        assert cart["items"] == []

    @pytest.mark.asyncio
    async def test_removing_unknown_item_keeps_other_items(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        await cart_service.add_plan(SESSION, "node-pro", 2)
        await cart_service.add_addon(SESSION, "de-domain")
        before = cart_store.carts[SESSION]["items"]
        writes = cart_store.replace_calls

        cart = await cart_service.remove_item(SESSION, "static-micro")

        assert cart["items"] == before
        assert cart_store.carts[SESSION]["items"] == before
        assert cart_store.replace_calls == writes


class TestSetBillingCycle:
    """Tests for set_billing_cycle."""

    @pytest.mark.asyncio
    async def test_switches_to_yearly(self, cart_service: CartService) -> None:
        cart = await cart_service.set_billing_cycle(SESSION, "yearly")

        assert cart["billing_cycle"] == "yearly"

    @pytest.mark.asyncio
    async def test_invalid_cycle(
        self, cart_service: CartService, cart_store: InMemoryCartStore
    ) -> None:
        await cart_service.get_or_create_cart(SESSION)

        with pytest.raises(InvalidBillingCycleError, match="weekly"):
            await cart_service.set_billing_cycle(SESSION, "weekly")

        assert cart_store.carts[SESSION]["billing_cycle"] == "monthly"

    @pytest.mark.asyncio
    async def test_cycle_does_not_change_totals(self, cart_service: CartService) -> None:
        await cart_service.add_plan(SESSION, "node-starter")
        monthly_cart = await cart_service.add_addon(SESSION, "de-domain")
        yearly_cart = await cart_service.set_billing_cycle(SESSION, "yearly")

        assert CartService.get_cart_totals(monthly_cart) == CartService.get_cart_totals(yearly_cart)
        assert CartService.get_cart_totals(yearly_cart) == (Decimal("10.90"), Decimal("111.00"))


class InterleavingCartStore(InMemoryCartStore):
    """Cart store where another writer commits right after each queued read."""

    def __init__(self) -> None:
        super().__init__()
        self.competing_writes: list[Callable[[dict], None]] = []

    def find_cart(self, session_id: str) -> dict | None:
        cart = super().find_cart(session_id)
        if cart is not None and self.competing_writes:
            self.competing_writes.pop(0)(self.carts[session_id])
        return cart


_other_writer_clock = itertools.count(1)


def add_domain_elsewhere(stored: dict) -> None:
    stored["items"].append(
        {"item_id": "de-domain", "item_type": "addon", "name": ".de Domain", "price": "1.00", "quantity": 1}
    )
    stored["updated_at"] = f"2026-01-05T12:00:{next(_other_writer_clock):02d}+00:00"


class TestConcurrentWrites:
    """A write that raced another writer is retried on a fresh read."""

    @pytest.fixture
    def racing_store(self) -> InterleavingCartStore:
        return InterleavingCartStore()

    @pytest.mark.asyncio
    async def test_lost_race_is_retried_without_losing_either_change(
        self, racing_store: InterleavingCartStore
    ) -> None:
        service = CartService(store=racing_store)
        await service.add_plan(SESSION, "node-starter")
        racing_store.competing_writes.append(add_domain_elsewhere)
        writes = racing_store.replace_calls

        cart = await service.add_plan(SESSION, "node-starter")

        quantities = {item["item_id"]: item["quantity"] for item in cart["items"]}
        assert quantities == {"node-starter": 2, "de-domain": 1}
        assert racing_store.carts[SESSION]["items"] == cart["items"]
        assert racing_store.replace_calls == writes + 2

    @pytest.mark.asyncio
    async def test_repeated_conflict_is_raised(self, racing_store: InterleavingCartStore) -> None:
        service = CartService(store=racing_store)
        await service.add_plan(SESSION, "node-starter")
        racing_store.competing_writes.extend([add_domain_elsewhere, add_domain_elsewhere])

        with pytest.raises(CartConflictError) as exc_info:
            await service.set_billing_cycle(SESSION, "yearly")

        assert exc_info.value.status_code == 409
        assert racing_store.carts[SESSION]["billing_cycle"] == "monthly"

    @pytest.mark.asyncio
    async def test_unchanged_cart_skips_the_write(self, racing_store: InterleavingCartStore) -> None:
        service = CartService(store=racing_store)
        await service.add_plan(SESSION, "node-starter")
        racing_store.competing_writes.append(add_domain_elsewhere)
        writes = racing_store.replace_calls

        await service.set_billing_cycle(SESSION, "monthly")

        assert racing_store.replace_calls == writes
