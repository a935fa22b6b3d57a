"""Unit tests for configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings

REQUIRED_ENV = {
    "SUPABASE_URL": "https://test.supabase.co",
    "SUPABASE_SECRET_KEY": "test-secret",
    "SUPABASE_SIGNING_KEY_JWK": "{}",
}


class TestSettings:
    """Tests for Settings class."""

    def test_settings_loads_from_environment(self) -> None:
        env_vars = {
            **REQUIRED_ENV,
            "APP_NAME": "test-app",
            "APP_ENV": "testing",
            "PORT": "9000",
            "BASE_URL": "https://shop.example.com",
            "STRIPE_CURRENCY": "usd",
            "MAX_REQUEST_BODY_SIZE": "1024",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings()

            assert settings.app_name == "test-app"
            assert settings.app_env == "testing"
            assert settings.port == 9000
            assert settings.base_url == "https://shop.example.com"
            assert settings.stripe_currency == "usd"
            assert settings.max_request_body_size == 1024

    def test_defaults(self) -> None:
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            settings = Settings(_env_file=None)

            assert settings.port == 8080
            assert settings.base_url == "https://dysv.de"
            assert settings.session_cookie_name == "session_id"
            assert settings.session_header_name == "X-Session-ID"
            assert settings.stripe_currency == "eur"
            assert settings.max_request_body_size == 65536
            assert settings.database_timeout_seconds == 30
            assert settings.stripe_timeout_seconds == 30
            assert settings.supabase_jwt_audience == "authenticated"

    def test_missing_required_settings(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_cors_origins_list(self) -> None:
        env_vars = {
            **REQUIRED_ENV,
            "CORS_ORIGINS": "http://localhost:3000, https://dysv.de , ",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings()

            assert settings.cors_origins_list == ["http://localhost:3000", "https://dysv.de"]

    def test_checkout_urls(self) -> None:
        with patch.dict(os.environ, {**REQUIRED_ENV, "BASE_URL": "https://dysv.de/"}, clear=False):
            settings = Settings()

            assert (
                settings.checkout_success_url
                == "https://dysv.de/checkout/success?session_id={CHECKOUT_SESSION_ID}"
            )
            assert settings.checkout_cancel_url == "https://dysv.de/cart"

    @pytest.mark.parametrize(
        ("key", "expected"),
        [("sk_test_abc", True), ("sk_live_abc", False), ("", False)],
    )
    def test_is_stripe_test_mode(self, key: str, expected: bool) -> None:
        with patch.dict(os.environ, {**REQUIRED_ENV, "STRIPE_SECRET_KEY": key}, clear=False):
            assert Settings().is_stripe_test_mode is expected


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()

        assert get_settings() is get_settings()

        get_settings.cache_clear()
