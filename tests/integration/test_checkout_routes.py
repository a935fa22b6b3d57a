"""Integration tests for checkout and order API endpoints."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
import stripe
from fastapi.testclient import TestClient

from tests.fakes import InMemoryOrderStore

HEADERS = {"X-Session-ID": "checkout-route-session"}


@pytest.fixture
def mock_stripe() -> Generator[MagicMock, None, None]:
    """Patch the Stripe module used by the checkout service."""
    stripe_module = MagicMock()
    stripe_session = MagicMock()
    stripe_session.id = "cs_test_123"
    stripe_session.url = "https://checkout.stripe.com/c/pay/cs_test_123"
    stripe_module.checkout.Session.create.return_value = stripe_session

    with patch("src.services.checkout_service.get_stripe", return_value=stripe_module):
        yield stripe_module


class TestCreateCheckout:
    """Tests for POST /api/v1/checkout endpoint."""

    def test_creates_checkout_for_anonymous_cart(
        self,
        client: TestClient,
        mock_stripe: MagicMock,
        order_store: InMemoryOrderStore,
    ) -> None:
        client.post("/api/v1/cart/plan", json={"plan_id": "node-starter"}, headers=HEADERS)
        client.post("/api/v1/cart/addon", json={"addon_id": "de-domain"}, headers=HEADERS)

        response = client.post("/api/v1/checkout", headers=HEADERS)

        assert response.status_code == 201
        data = response.json()
        assert data["url"] == "https://checkout.stripe.com/c/pay/cs_test_123"
        assert data["stripe_session_id"] == "cs_test_123"
        assert data["order_id"] == order_store.orders[0]["id"]

        params = mock_stripe.checkout.Session.create.call_args.kwargs
        assert params["mode"] == "subscription"
        assert params["success_url"] == "https://dysv.de/checkout/success?session_id={CHECKOUT_SESSION_ID}"
        assert [li["price_data"]["unit_amount"] for li in params["line_items"]] == [990, 100]

    def test_customer_email_in_body(self, client: TestClient, mock_stripe: MagicMock) -> None:
        client.post("/api/v1/cart/plan", json={"plan_id": "node-pro"}, headers=HEADERS)

        response = client.post(
            "/api/v1/checkout",
            json={"customer_email": "buyer@example.com"},
            headers=HEADERS,
        )

        assert response.status_code == 201
        assert mock_stripe.checkout.Session.create.call_args.kwargs["customer_email"] == "buyer@example.com"

    def test_empty_cart(
        self,
        client: TestClient,
        mock_stripe: MagicMock,
        order_store: InMemoryOrderStore,
    ) -> None:
        response = client.post("/api/v1/checkout", headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["detail"] == "cart is empty"
        mock_stripe.checkout.Session.create.assert_not_called()
        assert order_store.orders == []

    def test_empty_cart_without_stripe_key(self, client: TestClient, test_settings) -> None:
        unconfigured = test_settings.model_copy(update={"stripe_secret_key": ""})

        with patch("src.services.checkout_service.get_settings", return_value=unconfigured):
            response = client.post("/api/v1/checkout", headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["detail"] == "cart is empty"

    def test_address_without_login(self, client: TestClient, mock_stripe: MagicMock) -> None:
        client.post("/api/v1/cart/plan", json={"plan_id": "node-pro"}, headers=HEADERS)

        response = client.post(
            "/api/v1/checkout",
            json={"address_id": "660e8400-e29b-41d4-a716-446655440000"},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "login required to use a saved address"

    def test_stripe_failure(
        self,
        client: TestClient,
        mock_stripe: MagicMock,
        order_store: InMemoryOrderStore,
    ) -> None:
        mock_stripe.checkout.Session.create.side_effect = stripe.APIConnectionError("down")
        client.post("/api/v1/cart/plan", json={"plan_id": "node-pro"}, headers=HEADERS)

        response = client.post("/api/v1/checkout", headers=HEADERS)

        assert response.status_code == 500
        assert response.json()["error"] == "checkout_session_failed"
        assert order_store.orders == []


class TestListOrders:
    """Tests for GET /api/v1/orders endpoint."""

    def test_lists_session_orders(self, client: TestClient, mock_stripe: MagicMock) -> None:
        client.post("/api/v1/cart/plan", json={"plan_id": "static-micro"}, headers=HEADERS)
        client.post("/api/v1/checkout", headers=HEADERS)

        response = client.get("/api/v1/orders", headers=HEADERS)

        assert response.status_code == 200
        orders = response.json()["items"]
        assert len(orders) == 1
        assert orders[0]["status"] == "pending"
        assert orders[0]["total_cents"] == 390
        assert orders[0]["items"][0]["item_id"] == "static-micro"

    def test_other_sessions_see_nothing(self, client: TestClient, mock_stripe: MagicMock) -> None:
        client.post("/api/v1/cart/plan", json={"plan_id": "static-micro"}, headers=HEADERS)
        client.post("/api/v1/checkout", headers=HEADERS)

        response = client.get("/api/v1/orders", headers={"X-Session-ID": "someone-else"})

        assert response.json()["items"] == []
