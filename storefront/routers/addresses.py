"""Address book API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.address import (
    AddressCreate,
    AddressData,
    AddressListData,
    AddressUpdate,
)
from storefront.schemas.common import Empty, Envelope
from storefront.services.address_service import AddressService

router = APIRouter()


@router.get("", response_model=Envelope[AddressListData], summary="List addresses")
async def list_addresses(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Default address first, then most recently updated."""
    addresses, pagination = AddressService(db).list(current_user.id, page, limit)  # type: ignore[arg-type]
    return envelope(
        "Addresses fetched successfully", {"addresses": addresses, "pagination": pagination}
    )


@router.get("/default", response_model=Envelope[AddressData], summary="Get default address")
async def get_default_address(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    address = AddressService(db).get_default(current_user.id)  # type: ignore[arg-type]
    return envelope("Default address fetched successfully", {"address": address})


@router.post(
    "",
    response_model=Envelope[AddressData],
    status_code=201,
    summary="Add an address",
    responses={409: {"description": "Address already exists"}},
)
async def create_address(
    data: AddressCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """The first address becomes the default."""
    address = AddressService(db).create(current_user.id, data)  # type: ignore[arg-type]
    return envelope("Address created successfully", {"address": address})


@router.get(
    "/{address_id}",
    response_model=Envelope[AddressData],
    summary="Get address",
    responses={404: {"description": "Address not found"}},
)
async def get_address(
    address_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    address = AddressService(db).get(current_user.id, address_id)  # type: ignore[arg-type]
    return envelope("Address fetched successfully", {"address": address})


@router.patch(
    "/{address_id}",
    response_model=Envelope[AddressData],
    summary="Update address",
    responses={
        404: {"description": "Address not found"},
        409: {"description": "Address already exists"},
    },
)
async def update_address(
    address_id: UUID,
    data: AddressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    address = AddressService(db).update(
        current_user.id,  # type: ignore[arg-type]
        address_id,
        data.model_dump(exclude_unset=True),
    )
    return envelope("Address updated successfully", {"address": address})


@router.delete(
    "/{address_id}",
    response_model=Envelope[Empty],
    summary="Delete address",
    responses={404: {"description": "Address not found"}},
)
async def delete_address(
    address_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Deleting the default promotes the most recently updated remaining address."""
    AddressService(db).delete(current_user.id, address_id)  # type: ignore[arg-type]
    return envelope("Address deleted successfully")
