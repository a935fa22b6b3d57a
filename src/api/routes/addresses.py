"""Saved billing address API routes."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.api.deps import CurrentUser
from src.schemas.address import (
    AddressCreate,
    AddressListResponse,
    AddressResponse,
    AddressUpdate,
)
from src.services.address_service import AddressService
from src.services.errors import AddressNotFoundError

router = APIRouter(prefix="/user/addresses", tags=["addresses"])


@router.get(
    "",
    response_model=AddressListResponse,
    summary="List my addresses",
    description="Returns the authenticated user's saved addresses, default first.",
)
async def list_addresses(user: CurrentUser) -> AddressListResponse:
    service = AddressService()
    addresses = await service.list_addresses(user.user_id)
    return AddressListResponse(items=[AddressResponse(**address) for address in addresses])


@router.post(
    "",
    response_model=AddressResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save an address",
)
async def create_address(data: AddressCreate, user: CurrentUser) -> AddressResponse:
    """Save a new address for the authenticated user.

    Saving it as default clears the default flag on the user's other addresses.

    Args:
        data: Address fields.
        user: The authenticated user context.

    Returns:
        AddressResponse: The saved address.
    """
    service = AddressService()
    address = await service.create_address(user.user_id, data)
    return AddressResponse(**address)


@router.get(
    "/{address_id}",
    response_model=AddressResponse,
    summary="Get an address",
)
async def get_address(address_id: UUID, user: CurrentUser) -> AddressResponse:
    """Get one of the authenticated user's addresses.

    Raises:
        HTTPException: 404 if not found or owned by another user.
    """
    service = AddressService()
    address = await service.get_address(address_id, user.user_id)

    if not address:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Address not found",
        )

    return AddressResponse(**address)


@router.put(
    "/{address_id}",
    response_model=AddressResponse,
    summary="Update an address",
)
async def update_address(
    address_id: UUID,
    data: AddressUpdate,
    user: CurrentUser,
) -> AddressResponse:
    """Replace the fields of one of the user's addresses.

    Raises:
        HTTPException: 404 if not found or owned by another user.
    """
    service = AddressService()

    try:
        address = await service.update_address(address_id, user.user_id, data)
    except AddressNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return AddressResponse(**address)


@router.delete(
    "/{address_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an address",
)
async def delete_address(address_id: UUID, user: CurrentUser) -> None:
    service = AddressService()

    try:
        await service.delete_address(address_id, user.user_id)
    except AddressNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
