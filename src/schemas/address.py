"""Address Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AddressBase(BaseModel):
    """Fields shared by address create, update and response schemas."""

    label: str = Field(default="", max_length=100, description="Label such as Home or Office")
    line1: str = Field(..., min_length=1, max_length=255, description="Street and number")
    line2: str | None = Field(default=None, max_length=255, description="Additional address line")
    city: str = Field(..., min_length=1, max_length=100, description="City")
    postal_code: str = Field(..., min_length=1, max_length=20, description="Postal code")
    state: str | None = Field(default=None, max_length=100, description="State or region")
    country: str = Field(
        ...,
        min_length=2,
        max_length=2,
        pattern=r"^[A-Za-z]{2}$",
        description="ISO 3166-1 alpha-2 country code",
    )
    is_default: bool = Field(default=False, description="Use as default billing address")

    @field_validator("country")
    @classmethod
    def normalize_country(cls, value: str) -> str:
        """Store country codes upper-cased."""
        return value.upper()


class AddressCreate(AddressBase):
    """Schema for POST /user/addresses."""


class AddressUpdate(AddressBase):
    """Schema for PUT /user/addresses/{address_id}. Replaces all fields."""


class AddressResponse(AddressBase):
    """Schema for address API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Address identifier")
    user_id: str = Field(description="Owner user ID")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last modification timestamp")


class AddressListResponse(BaseModel):
    """Schema for address list API responses."""

    items: list[AddressResponse] = Field(description="The user's addresses")
