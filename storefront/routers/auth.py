"""Authentication endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import get_bearer_token, get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.core.token_blacklist import TokenBlacklist, get_token_blacklist
from storefront.models.user import User
from storefront.schemas.auth import (
    AuthData,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    TokenPair,
    UpdatePasswordRequest,
    UserData,
)
from storefront.schemas.common import Empty, Envelope
from storefront.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/signup",
    response_model=Envelope[AuthData],
    status_code=201,
    summary="Register a new user",
    responses={409: {"description": "Email already registered"}},
)
async def signup(data: SignupRequest, db: Session = Depends(get_db)) -> dict:
    tokens = AuthService(db).signup(data)
    return envelope(
        "User registered successfully",
        {
            "user": tokens.user,
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
        },
    )


@router.post(
    "/signin",
    response_model=Envelope[AuthData],
    summary="Sign in with email and password",
    responses={401: {"description": "Invalid credentials"}},
)
async def signin(data: SigninRequest, db: Session = Depends(get_db)) -> dict:
    tokens = AuthService(db).signin(data.email, data.password)
    return envelope(
        "Signed in successfully",
        {
            "user": tokens.user,
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
        },
    )


@router.post(
    "/refresh-token",
    response_model=Envelope[TokenPair],
    summary="Rotate a refresh token",
    responses={401: {"description": "Invalid, expired or already used refresh token"}},
)
async def refresh_token(data: RefreshTokenRequest, db: Session = Depends(get_db)) -> dict:
    tokens = AuthService(db).refresh(data.refresh_token)
    return envelope(
        "Token refreshed successfully",
        {"access_token": tokens.access_token, "refresh_token": tokens.refresh_token},
    )


@router.post(
    "/logout",
    response_model=Envelope[Empty],
    summary="Invalidate the current access token",
)
async def logout(
    token: str = Depends(get_bearer_token),
    current_user: User = Depends(get_current_user),
    blacklist: TokenBlacklist = Depends(get_token_blacklist),
    db: Session = Depends(get_db),
) -> dict:
    AuthService(db).logout(token, blacklist)
    return envelope("Logged out successfully")


@router.get("/profile", response_model=Envelope[UserData], summary="Current user profile")
async def profile(current_user: User = Depends(get_current_user)) -> dict:
    return envelope("Profile fetched successfully", {"user": current_user})


@router.post(
    "/update-password",
    response_model=Envelope[Empty],
    summary="Change the current user's password",
    responses={401: {"description": "Current password is incorrect"}},
)
async def update_password(
    data: UpdatePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    AuthService(db).update_password(current_user, data.current_password, data.new_password)
    return envelope("Password updated successfully")
