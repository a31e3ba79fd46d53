from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import atomic, get_db
from storefront.core.errors import ValidationError
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.auth import UserData
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.user import UserUpdate
from storefront.services.auth_service import AuthService

router = APIRouter()


@router.get("/me", response_model=Envelope[UserData], summary="Get current user")
async def get_me(current_user: User = Depends(get_current_user)) -> dict:
    return envelope("User fetched successfully", {"user": current_user})


@router.patch(
    "/me",
    response_model=Envelope[UserData],
    summary="Update current user profile",
    responses={422: {"description": "Validation error"}},
)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("Nothing to update")
    with atomic(db):
        UserRepository(db).update(current_user, update_data)
    return envelope("User updated successfully", {"user": current_user})


@router.delete("/me", response_model=Envelope[Empty], summary="Deactivate current user")
async def delete_me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Soft delete: the account is deactivated and its refresh tokens revoked."""
    AuthService(db).deactivate(current_user)
    return envelope("User deleted successfully")
