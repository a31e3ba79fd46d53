"""``Idempotency-Key`` handling for order payment.

A client key is claimed for one order before the charge runs:

- a key seen for the first time is stored as in flight and the capture proceeds;
- a key whose capture finished replays the stored response with
  ``Idempotency-Replayed: true``;
- a key that is still in flight is rejected with 409;
- a key first used for a different order is rejected with 422.

A capture that fails releases its claim, so the client may retry with the
same key. The processor receives a key derived from the client key, so such a
retry cannot produce a second charge.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.repositories.idempotency_repository import IdempotencyRepository
from storefront.repositories.order_repository import OrderRepository

IDEMPOTENCY_HEADER = "Idempotency-Key"
REPLAYED_HEADER = "Idempotency-Replayed"
MAX_KEY_LENGTH = 255

IN_FLIGHT_MESSAGE = "A payment with this Idempotency-Key is still in progress"


@dataclass(frozen=True)
class IdempotencyClaim:
    user_id: UUID
    key: str
    order_id: UUID


def claim_idempotency_key(
    request: Request,
    db: Session,
    user_id: UUID,
    order_id: UUID,
) -> JSONResponse | IdempotencyClaim | None:
    """Claim the request's key for ``order_id``.

    Returns ``None`` without a key header, the stored response for a finished
    key, or the new claim.
    """
    key = (request.headers.get(IDEMPOTENCY_HEADER) or "").strip()
    if not key:
        return None
    if len(key) > MAX_KEY_LENGTH:
        raise ValidationError(f"{IDEMPOTENCY_HEADER} must be at most {MAX_KEY_LENGTH} characters")

    repo = IdempotencyRepository(db)
    record = repo.get_by_key(user_id, key)
    if record is None:
        if OrderRepository(db).get_by_id(order_id, user_id) is None:
            raise NotFoundError("Order not found")
        if repo.claim(user_id, key, order_id) is None:
            raise ConflictError(IN_FLIGHT_MESSAGE)
        return IdempotencyClaim(user_id=user_id, key=key, order_id=order_id)

    if record.order_id != order_id:
        raise ValidationError(f"{IDEMPOTENCY_HEADER} was already used for a different order")
    if record.response_status is None:
        raise ConflictError(IN_FLIGHT_MESSAGE)

    response = JSONResponse(
        content=record.response_body, status_code=int(record.response_status)
    )
    response.headers[REPLAYED_HEADER] = "true"
    return response


def complete_idempotency_key(
    db: Session, claim: IdempotencyClaim, status: int, body: dict[str, Any]
) -> None:
    """Store the finished response for replays."""
    repo = IdempotencyRepository(db)
    record = repo.get_by_key(claim.user_id, claim.key)
    if record is not None:
        repo.complete(record, status, body)


def release_idempotency_key(db: Session, claim: IdempotencyClaim) -> None:
    IdempotencyRepository(db).release(claim.user_id, claim.key)
