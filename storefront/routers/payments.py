"""Payments API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.idempotency import (
    claim_idempotency_key,
    complete_idempotency_key,
    release_idempotency_key,
)
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Envelope
from storefront.schemas.payment import (
    MakePaymentRequest,
    PaymentData,
    PaymentListData,
    PaymentResponse,
)
from storefront.services.payment_processor import PaymentProcessorBase, get_payment_processor
from storefront.services.payment_service import PaymentService

router = APIRouter()


@router.post(
    "",
    response_model=Envelope[PaymentData],
    status_code=201,
    summary="Pay for an order",
    responses={
        400: {"description": "Order already paid or processor declined"},
        404: {"description": "Order or payment card not found"},
        409: {"description": "Same Idempotency-Key still in progress"},
        422: {"description": "Validation error or Idempotency-Key reused for another order"},
    },
)
async def make_payment(
    data: MakePaymentRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    processor: PaymentProcessorBase = Depends(get_payment_processor),
) -> dict | JSONResponse:
    """Charge an order's total to a saved card or a one-off token.

    Honours an ``Idempotency-Key`` header: a repeated key for the same order
    replays the first successful response without charging again.
    """
    claim = claim_idempotency_key(
        request, db, current_user.id, data.order_id  # type: ignore[arg-type]
    )
    if isinstance(claim, JSONResponse):
        return claim

    try:
        payment = PaymentService(db, processor).capture(
            current_user, data, idempotency_key=claim.key if claim else None
        )
    except Exception:
        if claim is not None:
            release_idempotency_key(db, claim)
        raise

    body = envelope(
        "Payment completed successfully",
        PaymentData(payment=PaymentResponse.model_validate(payment)).model_dump(mode="json"),
    )
    if claim is not None:
        complete_idempotency_key(db, claim, 201, body)
    return body


@router.get("", response_model=Envelope[PaymentListData], summary="Payment history")
async def list_payments(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    order_id: UUID | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    processor: PaymentProcessorBase = Depends(get_payment_processor),
) -> dict:
    payments, pagination = PaymentService(db, processor).list_payments(
        current_user.id,  # type: ignore[arg-type]
        page,
        limit,
        order_id=order_id,
    )
    return envelope(
        "Payments fetched successfully", {"payments": payments, "pagination": pagination}
    )
