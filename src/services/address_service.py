"""Saved billing address business logic service."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from src.core.supabase import get_supabase_client
from src.models.address import Address
from src.schemas.address import AddressCreate, AddressUpdate
from src.services.errors import AddressNotFoundError

logger = logging.getLogger(__name__)


class AddressService:
    """Service for managing an authenticated user's addresses.

    Every query is scoped by user_id so one user can never read or
    modify another user's addresses.
    """

    TABLE = "addresses"

    def __init__(self) -> None:
        """Initialize address service with Supabase client."""
        self.client = get_supabase_client()

    async def list_addresses(self, user_id: UUID) -> list[Address]:
        """Get all addresses of a user, default address first.

        Args:
            user_id: The auth user ID.

        Returns:
            list[Address]: Address rows.
        """
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("is_default", desc=True)
            .order("created_at")
            .execute()
        )

        return response.data or []

    async def get_address(self, address_id: UUID, user_id: UUID) -> Address | None:
        """Get one of the user's addresses.

        Args:
            address_id: The address UUID.
            user_id: The owner's auth user ID.

        Returns:
            dict | None: The address or None if missing or owned by someone else.
        """
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", str(address_id))
            .eq("user_id", str(user_id))
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    async def _unset_defaults(self, user_id: UUID) -> None:
        self.client.table(self.TABLE).update({"is_default": False}).eq(
            "user_id", str(user_id)
        ).eq("is_default", True).execute()

    async def create_address(self, user_id: UUID, data: AddressCreate) -> Address:
        """Save a new address for the user.

        If the new address is the default, the user's other addresses lose
        their default flag first.

        Args:
            user_id: The owner's auth user ID.
            data: Address fields.

        Returns:
            dict: The created address row.
        """
        if data.is_default:
            await self._unset_defaults(user_id)

        now = datetime.now(timezone.utc).isoformat()
        address_data = {
            **data.model_dump(),
            "user_id": str(user_id),
            "created_at": now,
            "updated_at": now,
        }

        response = self.client.table(self.TABLE).insert(address_data).execute()
        address = response.data[0]
        logger.info("Created address %s for user %s", address.get("id"), user_id)
        return address

    async def update_address(
        self,
        address_id: UUID,
        user_id: UUID,
        data: AddressUpdate,
    ) -> Address:
        """Replace the fields of one of the user's addresses.

        Raises:
            AddressNotFoundError: If the address does not exist for this user.
        """
        if not await self.get_address(address_id, user_id):
            raise AddressNotFoundError()

        if data.is_default:
            await self._unset_defaults(user_id)

        update_data = {
            **data.model_dump(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        response = (
            self.client.table(self.TABLE)
            .update(update_data)
            .eq("id", str(address_id))
            .eq("user_id", str(user_id))
            .execute()
        )

        if not response.data:
            raise AddressNotFoundError()
        return response.data[0]

    async def delete_address(self, address_id: UUID, user_id: UUID) -> None:
        """Delete one of the user's addresses.

        Raises:
            AddressNotFoundError: If nothing was deleted.
        """
        response = (
            self.client.table(self.TABLE)
            .delete()
            .eq("id", str(address_id))
            .eq("user_id", str(user_id))
            .execute()
        )

        if not response.data:
            raise AddressNotFoundError()
        logger.info("Deleted address %s for user %s", address_id, user_id)
