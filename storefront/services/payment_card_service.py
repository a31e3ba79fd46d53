"""Payment-card vault: tokenized cards with at most one default per user."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.payment_card import PaymentCard
from storefront.models.user import User
from storefront.repositories.payment_card_repository import PaymentCardRepository
from storefront.repositories.user_repository import UserRepository
from storefront.services.payment_processor import CardDetails, PaymentProcessorBase

logger = logging.getLogger(__name__)

FALLBACK_CARDHOLDER_NAME = "Card holder"


def _normalize_name(*candidates: str | None) -> str:
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return FALLBACK_CARDHOLDER_NAME


class PaymentCardService:
    def __init__(self, db: Session, processor: PaymentProcessorBase):
        self.db = db
        self.processor = processor
        self.cards = PaymentCardRepository(db)
        self.users = UserRepository(db)

    def ensure_customer(self, user: User) -> str:
        """Return the user's processor customer id, creating it on first use.

        A newly created mapping is committed right away so later failures
        in the caller do not orphan the processor customer.
        """
        if user.processor_customer_id:
            return str(user.processor_customer_id)

        customer_id = self.processor.create_customer(
            email=str(user.email), name=user.full_name, user_id=str(user.id)
        )
        with atomic(self.db):
            self.users.set_processor_customer_id(user, customer_id)
        logger.info("Created processor customer for user %s", user.id)
        return customer_id

    def list(
        self, user_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[PaymentCard], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        total = self.cards.count(user_id)
        cards = self.cards.get_all(user_id, skip=request.offset, limit=request.limit)
        return cards, build_pagination(total, request.page, request.limit)

    def get_default(self, user_id: UUID) -> PaymentCard | None:
        return self.cards.get_default(user_id)

    def get(self, user_id: UUID, card_id: UUID) -> PaymentCard:
        card = self.cards.get_by_id(card_id, user_id)
        if card is None:
            raise NotFoundError("Payment card not found")
        return card

    def create(
        self,
        user: User,
        processor_payment_method_id: str,
        cardholder_name: str | None = None,
        set_as_default: bool = False,
    ) -> PaymentCard:
        customer_id = self.ensure_customer(user)
        with self._card_transaction(user.id):
            card = self.save_card(
                user.id, customer_id, processor_payment_method_id, cardholder_name, set_as_default
            )
        logger.info("Saved payment card %s for user %s", card.id, user.id)
        return card

    def save_card(
        self,
        user_id: UUID,
        customer_id: str,
        processor_payment_method_id: str,
        cardholder_name: str | None,
        set_as_default: bool,
    ) -> PaymentCard:
        """Vault a token inside the caller's transaction.

        The caller must hold the user row lock.
        """
        details = self.processor.retrieve_card(processor_payment_method_id)
        self.processor.attach_payment_method(details.payment_method_id, customer_id)

        make_default = set_as_default or self.cards.get_default(user_id) is None
        if make_default:
            self.cards.clear_defaults(user_id)
        return self.cards.create(
            user_id, self._card_fields(details, cardholder_name, make_default)
        )

    def update(self, user_id: UUID, card_id: UUID, data: dict[str, Any]) -> PaymentCard:
        card = self.get(user_id, card_id)
        update_data: dict[str, Any] = {}
        if data.get("cardholder_name") is not None:
            update_data["cardholder_name"] = _normalize_name(data["cardholder_name"])
        if not update_data:
            raise ValidationError("Nothing to update")
        with atomic(self.db):
            self.cards.update(card, update_data)
        return card

    def make_default(self, user_id: UUID, card_id: UUID) -> PaymentCard:
        with self._card_transaction(user_id):
            # Re-read under the user lock; the card may have been deleted meanwhile
            card = self.cards.get_by_id(card_id, user_id, refresh=True)
            if card is None:
                raise NotFoundError("Payment card not found")
            if card.is_default:
                return card
            self.cards.clear_defaults(user_id, except_id=card.id)  # type: ignore[arg-type]
            self.cards.set_default_flag(card)
        logger.info("Payment card %s is now default for user %s", card.id, user_id)
        return card

    def delete(self, user_id: UUID, card_id: UUID) -> PaymentCard:
        with self._card_transaction(user_id):
            card = self.cards.get_by_id(card_id, user_id, refresh=True)
            if card is None:
                raise NotFoundError("Payment card not found")
            was_default = bool(card.is_default)
            self.cards.delete(card)
            if was_default:
                successor = self.cards.get_most_recent(user_id)
                if successor is not None:
                    self.cards.set_default_flag(successor)
                    logger.info(
                        "Promoted payment card %s to default for user %s", successor.id, user_id
                    )
        return card

    @contextmanager
    def _card_transaction(self, user_id: UUID) -> Iterator[None]:
        """Transaction that serializes default-card changes for one user."""
        try:
            with atomic(self.db):
                self.users.lock(user_id)
                yield
        except IntegrityError as e:
            raise ConflictError("Default payment card changed concurrently, retry") from e

    @staticmethod
    def _card_fields(
        details: CardDetails, cardholder_name: str | None, is_default: bool
    ) -> dict[str, Any]:
        return {
            "processor_payment_method_id": details.payment_method_id,
            "brand": details.brand.upper(),
            "last4": details.last4,
            "exp_month": details.exp_month,
            "exp_year": details.exp_year,
            "cardholder_name": _normalize_name(cardholder_name, details.billing_name),
            "country": details.country,
            "fingerprint": details.fingerprint,
            "is_default": is_default,
        }
