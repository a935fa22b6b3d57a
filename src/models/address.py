"""Address model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict


class Address(TypedDict):
    """Addresses table row representation.

    Each row belongs to one auth user. At most one row per user has
    is_default set.
    """

    id: str
    user_id: str
    label: str
    line1: str
    line2: str | None
    city: str
    postal_code: str
    state: str | None
    country: str
    is_default: bool
    created_at: datetime
    updated_at: datetime
