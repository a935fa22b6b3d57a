"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="dysv-storefront", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    max_request_body_size: int = Field(default=65536, description="Maximum accepted request body in bytes")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,https://dysv.de",
        description="Comma-separated list of allowed CORS origins",
    )

    # Public site
    base_url: str = Field(default="https://dysv.de", description="Storefront base URL used for checkout redirects")

    # Auth redirects
    auth_redirect_url: str = Field(
        default="https://dysv.de",
        description="Redirect URL after email verification and password reset",
    )

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")
    supabase_signing_key_jwk: str = Field(..., description="Supabase signing key JWK (JSON string) for JWT token verification")
    supabase_jwt_audience: str = Field(default="authenticated", description="Expected aud claim of access tokens")
    database_timeout_seconds: int = Field(default=30, description="Timeout for database requests in seconds")

    # Cart session
    session_cookie_name: str = Field(default="session_id", description="Cart session cookie name")
    session_header_name: str = Field(default="X-Session-ID", description="Cart session header name")
    session_cookie_max_age: int = Field(default=2592000, description="Session cookie max age in seconds (30 days)")
    session_cookie_secure: bool = Field(default=True, description="Use secure cookies (HTTPS only)")

    # Stripe
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")
    stripe_webhook_secret: str = Field(default="", description="Stripe webhook signing secret")
    stripe_publishable_key: str = Field(default="", description="Stripe publishable key (for frontend)")
    stripe_api_version: str = Field(default="", description="Expected Stripe API version of webhook events")
    stripe_currency: str = Field(default="eur", description="Currency for checkout line items")
    stripe_timeout_seconds: int = Field(default=30, description="Timeout for Stripe API requests in seconds")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_stripe_test_mode(self) -> bool:
        """Check if using Stripe test keys."""
        return self.stripe_secret_key.startswith("sk_test_")

    @property
    def checkout_success_url(self) -> str:
        """Stripe success redirect, carrying the checkout session id placeholder."""
        return f"{self.base_url.rstrip('/')}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def checkout_cancel_url(self) -> str:
        """Stripe cancel redirect back to the cart page."""
        return f"{self.base_url.rstrip('/')}/cart"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
