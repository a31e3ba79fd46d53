"""Payment processor abstraction layer.

The vault and the capture flow talk to the processor only through
``PaymentProcessorBase`` so tests can substitute a mock.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from storefront.core.config import settings
from storefront.core.errors import ProcessorError

logger = logging.getLogger(__name__)

# Stripe error code for a payment method that is already attached
ALREADY_ATTACHED_CODE = "resource_already_exists"


@dataclass
class CardDetails:
    """Card metadata read back from the processor for a payment-method token."""

    payment_method_id: str
    brand: str
    last4: str
    exp_month: int
    exp_year: int
    country: str | None = None
    fingerprint: str | None = None
    billing_name: str | None = None


@dataclass
class ChargeResult:
    """Outcome of a create-and-confirm call."""

    payment_intent_id: str
    status: str
    receipt_url: str | None = None


class PaymentProcessorBase(ABC):
    """Abstract base class for card processors."""

    @abstractmethod
    def create_customer(self, email: str, name: str | None, user_id: str) -> str:
        """Create a processor customer and return its id."""
        pass  # pragma: no cover

    @abstractmethod
    def retrieve_card(self, payment_method_id: str) -> CardDetails:
        """Fetch card metadata for a payment-method token."""
        pass  # pragma: no cover

    @abstractmethod
    def attach_payment_method(self, payment_method_id: str, customer_id: str) -> None:
        """Attach a token to a customer. Already attached is not an error."""
        pass  # pragma: no cover

    @abstractmethod
    def create_and_confirm_payment(
        self,
        *,
        amount_minor: int,
        currency: str,
        payment_method_id: str,
        customer_id: str,
        idempotency_key: str,
        metadata: dict[str, str] | None = None,
    ) -> ChargeResult:
        """Charge ``amount_minor`` synchronously."""
        pass  # pragma: no cover


class StripeProcessor(PaymentProcessorBase):
    """Stripe implementation."""

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key or settings.stripe_api_key
        self._stripe: Any = None

    @property
    def stripe(self) -> Any:
        """Lazy-load stripe module."""
        if self._stripe is None:
            if not self.api_key:
                raise ProcessorError("Payment processor is not configured", 500)
            import stripe

            stripe.api_key = self.api_key
            self._stripe = stripe
        return self._stripe

    def _translate(self, exc: Exception) -> ProcessorError:
        message = getattr(exc, "user_message", None) or str(exc) or "Payment processor error"
        status = getattr(exc, "http_status", None) or 400
        return ProcessorError(message, int(status), getattr(exc, "code", None))

    def create_customer(self, email: str, name: str | None, user_id: str) -> str:
        params: dict[str, Any] = {"email": email, "metadata": {"user_id": user_id}}
        if name:
            params["name"] = name
        stripe = self.stripe
        try:
            customer = stripe.Customer.create(**params)
        except stripe.StripeError as e:
            raise self._translate(e) from e
        return str(customer.id)

    def retrieve_card(self, payment_method_id: str) -> CardDetails:
        stripe = self.stripe
        try:
            pm = stripe.PaymentMethod.retrieve(payment_method_id)
        except stripe.StripeError as e:
            raise self._translate(e) from e

        if getattr(pm, "type", None) != "card" or getattr(pm, "card", None) is None:
            raise ProcessorError("Payment method must be a card", 400)

        card = pm.card
        last4 = getattr(card, "last4", None)
        exp_month = getattr(card, "exp_month", None)
        exp_year = getattr(card, "exp_year", None)
        if not last4 or not exp_month or not exp_year:
            raise ProcessorError("Card details are incomplete", 400)

        billing = getattr(pm, "billing_details", None)
        return CardDetails(
            payment_method_id=str(pm.id),
            brand=str(getattr(card, "brand", None) or "unknown").upper(),
            last4=str(last4),
            exp_month=int(exp_month),
            exp_year=int(exp_year),
            country=getattr(card, "country", None),
            fingerprint=getattr(card, "fingerprint", None),
            billing_name=getattr(billing, "name", None) if billing is not None else None,
        )

    def attach_payment_method(self, payment_method_id: str, customer_id: str) -> None:
        stripe = self.stripe
        try:
            stripe.PaymentMethod.attach(payment_method_id, customer=customer_id)
        except stripe.StripeError as e:
            if getattr(e, "code", None) == ALREADY_ATTACHED_CODE:
                logger.debug("Payment method %s already attached", payment_method_id)
                return
            raise self._translate(e) from e

    def create_and_confirm_payment(
        self,
        *,
        amount_minor: int,
        currency: str,
        payment_method_id: str,
        customer_id: str,
        idempotency_key: str,
        metadata: dict[str, str] | None = None,
    ) -> ChargeResult:
        stripe = self.stripe
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency.lower(),
                customer=customer_id,
                payment_method=payment_method_id,
                payment_method_types=["card"],
                confirm=True,
                metadata=metadata or {},
                expand=["latest_charge"],
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as e:
            raise self._translate(e) from e

        latest_charge = getattr(intent, "latest_charge", None)
        receipt_url = getattr(latest_charge, "receipt_url", None) if latest_charge else None
        return ChargeResult(
            payment_intent_id=str(intent.id),
            status=str(intent.status),
            receipt_url=receipt_url,
        )


def get_payment_processor() -> PaymentProcessorBase:
    """FastAPI dependency returning the configured processor."""
    return StripeProcessor()
