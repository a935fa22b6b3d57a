"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from tests.fakes import InMemoryCartStore, InMemoryOrderStore

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPABASE_SIGNING_KEY_JWK", '{"kty": "EC", "crv": "P-256", "x": "", "y": ""}')
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_stripe_secret_key")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_webhook_secret")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_stripe_publishable_key")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("BASE_URL", "https://dysv.de")


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def cart_store() -> InMemoryCartStore:
    """Provide an empty in-memory cart store."""
    return InMemoryCartStore()


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    """Provide an empty in-memory order store."""
    return InMemoryOrderStore()


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client for health checks and address queries.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client), \
         patch("src.services.address_service.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(
    mock_supabase_client: MagicMock,
    cart_store: InMemoryCartStore,
    order_store: InMemoryOrderStore,
) -> Generator[TestClient, None, None]:
    """Provide a test client wired to in-memory cart and order stores.

    Args:
        mock_supabase_client: Mocked Supabase client fixture.
        cart_store: In-memory cart store.
        order_store: In-memory order store.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with patch("src.services.cart_service.CartStore", return_value=cart_store), \
         patch("src.services.checkout_service.OrderStore", return_value=order_store), \
         TestClient(app) as test_client:
        yield test_client
