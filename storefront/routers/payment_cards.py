"""Payment-card vault API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.payment_card import (
    MakeDefaultCardRequest,
    PaymentCardCreate,
    PaymentCardData,
    PaymentCardListData,
    PaymentCardUpdate,
)
from storefront.services.payment_card_service import PaymentCardService
from storefront.services.payment_processor import PaymentProcessorBase, get_payment_processor

router = APIRouter()


def get_card_service(
    db: Session = Depends(get_db),
    processor: PaymentProcessorBase = Depends(get_payment_processor),
) -> PaymentCardService:
    return PaymentCardService(db, processor)


@router.post(
    "",
    response_model=Envelope[PaymentCardData],
    status_code=201,
    summary="Save a card",
    responses={400: {"description": "Processor rejected the payment method"}},
)
async def create_payment_card(
    data: PaymentCardCreate,
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    """Vault a processor payment-method token for the current user."""
    card = service.create(
        current_user,
        data.processor_payment_method_id,
        data.cardholder_name,
        data.set_as_default,
    )
    return envelope("Payment card saved successfully", {"card": card})


@router.get("", response_model=Envelope[PaymentCardListData], summary="List saved cards")
async def list_payment_cards(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    """Default card first, then newest first."""
    cards, pagination = service.list(current_user.id, page, limit)  # type: ignore[arg-type]
    return envelope(
        "Payment cards fetched successfully", {"cards": cards, "pagination": pagination}
    )


@router.get("/default", response_model=Envelope[PaymentCardData], summary="Get default card")
async def get_default_payment_card(
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    card = service.get_default(current_user.id)  # type: ignore[arg-type]
    return envelope("Default payment card fetched successfully", {"card": card})


@router.post(
    "/default",
    response_model=Envelope[PaymentCardData],
    summary="Make a card the default",
    responses={404: {"description": "Payment card not found"}},
)
async def make_default_payment_card(
    data: MakeDefaultCardRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    card = service.make_default(current_user.id, data.id)  # type: ignore[arg-type]
    return envelope("Default payment card updated successfully", {"card": card})


@router.get(
    "/{card_id}",
    response_model=Envelope[PaymentCardData],
    summary="Get saved card",
    responses={404: {"description": "Payment card not found"}},
)
async def get_payment_card(
    card_id: UUID,
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    card = service.get(current_user.id, card_id)  # type: ignore[arg-type]
    return envelope("Payment card fetched successfully", {"card": card})


@router.patch(
    "/{card_id}",
    response_model=Envelope[PaymentCardData],
    summary="Rename a saved card",
    responses={404: {"description": "Payment card not found"}},
)
async def update_payment_card(
    card_id: UUID,
    data: PaymentCardUpdate,
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    card = service.update(
        current_user.id,  # type: ignore[arg-type]
        card_id,
        data.model_dump(exclude_unset=True),
    )
    return envelope("Payment card updated successfully", {"card": card})


@router.delete(
    "/{card_id}",
    response_model=Envelope[Empty],
    summary="Delete a saved card",
    responses={404: {"description": "Payment card not found"}},
)
async def delete_payment_card(
    card_id: UUID,
    current_user: User = Depends(get_current_user),
    service: PaymentCardService = Depends(get_card_service),
) -> dict:
    """Deleting the default card promotes the most recently added remaining card."""
    service.delete(current_user.id, card_id)  # type: ignore[arg-type]
    return envelope("Payment card deleted successfully")
