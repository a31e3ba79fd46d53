"""Tests for the payments API."""

import uuid

from storefront.models.idempotency_record import IdempotencyRecord
from storefront.models.payment import Payment
from storefront.repositories.idempotency_repository import IdempotencyRepository
from tests.conftest import make_card, make_order


class TestMakePayment:
    def test_pay_with_saved_card(self, client, db_session, processor, user, auth_headers):
        order = make_order(db_session, user, total="1999.99")
        card = make_card(db_session, user, "pm_saved", is_default=True)

        response = client.post(
            "/payments",
            json={"order_id": str(order.id), "payment_card_id": str(card.id)},
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Payment completed successfully"
        payment = body["data"]["payment"]
        assert payment["order_id"] == str(order.id)
        assert payment["payment_card_id"] == str(card.id)
        assert payment["amount"] == "1999.99"
        assert payment["currency"] == "INR"
        assert payment["status"] == "SUCCEEDED"
        assert payment["order"]["payment_status"] == "PAID"
        assert payment["payment_card"]["last4"] == "4242"
        assert processor.create_and_confirm_payment.call_args.kwargs["amount_minor"] == 199999

    def test_pay_with_one_off_token(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)

        response = client.post(
            "/payments",
            json={"order_id": str(order.id), "processor_payment_method_id": "pm_once"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        payment = response.json()["data"]["payment"]
        assert payment["payment_card_id"] is None
        assert payment["processor_payment_method_id"] == "pm_once"

    def test_paying_twice_is_rejected(self, client, db_session, processor, user, auth_headers):
        order = make_order(db_session, user)
        payload = {"order_id": str(order.id), "processor_payment_method_id": "pm_once"}

        first = client.post("/payments", json=payload, headers=auth_headers)
        second = client.post("/payments", json=payload, headers=auth_headers)

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json() == {
            "message": "Order already paid",
            "errorType": "ValidationError",
            "status": 400,
        }
        assert db_session.query(Payment).filter(Payment.order_id == order.id).count() == 1
        assert processor.create_and_confirm_payment.call_count == 1

    def test_missing_payment_method(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)
        response = client.post(
            "/payments", json={"order_id": str(order.id)}, headers=auth_headers
        )
        assert response.status_code == 422
        assert response.json()["message"] == "Payment method is required"

    def test_unknown_order(self, client, auth_headers):
        response = client.post(
            "/payments",
            json={"order_id": str(uuid.uuid4()), "processor_payment_method_id": "pm_once"},
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["errorType"] == "NotFoundError"

    def test_card_of_another_user(self, client, db_session, user, other_user, auth_headers):
        order = make_order(db_session, user)
        card = make_card(db_session, other_user, "pm_theirs")
        response = client.post(
            "/payments",
            json={"order_id": str(order.id), "payment_card_id": str(card.id)},
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Payment card not found"

    def test_processor_error_is_passed_through(
        self, client, db_session, processor, user, auth_headers
    ):
        from storefront.core.errors import ProcessorError

        order = make_order(db_session, user)
        processor.create_and_confirm_payment.side_effect = ProcessorError(
            "Your card has insufficient funds.", 402, "card_declined"
        )

        response = client.post(
            "/payments",
            json={"order_id": str(order.id), "processor_payment_method_id": "pm_poor"},
            headers=auth_headers,
        )

        assert response.status_code == 402
        assert response.json() == {
            "message": "Your card has insufficient funds.",
            "errorType": "ProcessorError",
            "status": 402,
        }
        assert db_session.query(Payment).count() == 0

    def test_requires_authentication(self, client, db_session, user):
        order = make_order(db_session, user)
        response = client.post(
            "/payments",
            json={"order_id": str(order.id), "processor_payment_method_id": "pm_once"},
        )
        assert response.status_code == 401
        assert response.json()["errorType"] == "AuthError"


class TestIdempotentPayment:
    def test_repeated_key_replays_without_charging(
        self, client, db_session, processor, user, auth_headers
    ):
        order = make_order(db_session, user)
        payload = {"order_id": str(order.id), "processor_payment_method_id": "pm_once"}
        headers = {**auth_headers, "Idempotency-Key": "pay-order-1"}

        first = client.post("/payments", json=payload, headers=headers)
        replay = client.post("/payments", json=payload, headers=headers)

        assert first.status_code == 201
        assert "Idempotency-Replayed" not in first.headers
        assert replay.status_code == 201
        assert replay.headers["Idempotency-Replayed"] == "true"
        assert replay.json() == first.json()
        assert processor.create_and_confirm_payment.call_count == 1
        key = processor.create_and_confirm_payment.call_args.kwargs["idempotency_key"]
        assert key.endswith(":pay-order-1")

    def test_keys_are_scoped_per_user(
        self, client, db_session, processor, user, other_user, auth_headers, other_auth_headers
    ):
        mine = make_order(db_session, user)
        theirs = make_order(db_session, other_user)

        first = client.post(
            "/payments",
            json={"order_id": str(mine.id), "processor_payment_method_id": "pm_a"},
            headers={**auth_headers, "Idempotency-Key": "shared-key"},
        )
        second = client.post(
            "/payments",
            json={"order_id": str(theirs.id), "processor_payment_method_id": "pm_b"},
            headers={**other_auth_headers, "Idempotency-Key": "shared-key"},
        )

        assert first.status_code == 201
        assert second.status_code == 201
        assert "Idempotency-Replayed" not in second.headers
        assert second.json()["data"]["payment"]["order_id"] == str(theirs.id)
        assert processor.create_and_confirm_payment.call_count == 2

    def test_failed_attempt_is_not_cached(
        self, client, db_session, processor, user, auth_headers
    ):
        from storefront.core.errors import ProcessorError

        order = make_order(db_session, user)
        payload = {"order_id": str(order.id), "processor_payment_method_id": "pm_once"}
        headers = {**auth_headers, "Idempotency-Key": "retry-me"}
        success = processor.create_and_confirm_payment.side_effect
        processor.create_and_confirm_payment.side_effect = ProcessorError("Declined", 402)

        failed = client.post("/payments", json=payload, headers=headers)
        processor.create_and_confirm_payment.side_effect = success
        retried = client.post("/payments", json=payload, headers=headers)

        assert failed.status_code == 402
        assert retried.status_code == 201
        assert "Idempotency-Replayed" not in retried.headers
        record = db_session.query(IdempotencyRecord).one()
        assert record.response_status == 201

    def test_key_still_in_flight_is_rejected(
        self, client, db_session, processor, user, auth_headers
    ):
        order = make_order(db_session, user)
        IdempotencyRepository(db_session).claim(user.id, "in-flight", order.id)

        response = client.post(
            "/payments",
            json={"order_id": str(order.id), "processor_payment_method_id": "pm_once"},
            headers={**auth_headers, "Idempotency-Key": "in-flight"},
        )

        assert response.status_code == 409
        assert response.json()["errorType"] == "ConflictError"
        processor.create_and_confirm_payment.assert_not_called()

    def test_key_reused_for_another_order(
        self, client, db_session, processor, user, auth_headers
    ):
        first = make_order(db_session, user)
        second = make_order(db_session, user)
        headers = {**auth_headers, "Idempotency-Key": "one-order-only"}

        paid = client.post(
            "/payments",
            json={"order_id": str(first.id), "processor_payment_method_id": "pm_once"},
            headers=headers,
        )
        reused = client.post(
            "/payments",
            json={"order_id": str(second.id), "processor_payment_method_id": "pm_once"},
            headers=headers,
        )

        assert paid.status_code == 201
        assert reused.status_code == 422
        assert reused.json()["errorType"] == "ValidationError"
        assert processor.create_and_confirm_payment.call_count == 1
        db_session.refresh(second)
        assert second.payment_status == "PENDING"


class TestListPayments:
    def test_lists_own_payments(self, client, db_session, user, other_user, auth_headers):
        first = make_order(db_session, user)
        second = make_order(db_session, user)
        for order in (first, second):
            client.post(
                "/payments",
                json={"order_id": str(order.id), "processor_payment_method_id": "pm_once"},
                headers=auth_headers,
            )
        make_order(db_session, other_user)

        response = client.get("/payments", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [p["order_id"] for p in data["payments"]] == [str(second.id), str(first.id)]
        assert data["pagination"]["total"] == 2

    def test_filter_by_order_and_lenient_paging(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)
        client.post(
            "/payments",
            json={"order_id": str(order.id), "processor_payment_method_id": "pm_once"},
            headers=auth_headers,
        )

        response = client.get(
            "/payments",
            params={"order_id": str(order.id), "page": "abc", "limit": "-4"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["payments"]) == 1
        assert data["pagination"]["page"] == 1
