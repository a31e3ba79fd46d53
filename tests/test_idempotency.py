"""Tests for claiming, completing and releasing idempotency keys."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.core.idempotency import (
    IdempotencyClaim,
    claim_idempotency_key,
    complete_idempotency_key,
    release_idempotency_key,
)
from storefront.models.idempotency_record import IdempotencyRecord
from storefront.repositories.idempotency_repository import IdempotencyRepository
from tests.conftest import make_order


@pytest.fixture
def repo(db_session: Session) -> IdempotencyRepository:
    return IdempotencyRepository(db_session)


@pytest.fixture
def order(db_session, user):
    return make_order(db_session, user)


def _make_request(headers: dict[str, str] | None = None, path: str = "/payments") -> Request:
    """Build a minimal ASGI Request for testing."""
    scope = {
        "type": "http",
        "method": "POST",
        "path": path,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


class TestIdempotencyRepository:
    def test_claim_is_exclusive_per_user(self, db_session, repo, user, order):
        assert repo.claim(user.id, "k1", order.id) is not None
        assert repo.claim(user.id, "k1", order.id) is None
        # The session is usable after the lost claim
        assert db_session.query(IdempotencyRecord).count() == 1

    def test_same_key_for_different_users(self, db_session, repo, user, other_user, order):
        theirs = make_order(db_session, other_user)
        assert repo.claim(user.id, "shared", order.id) is not None
        assert repo.claim(other_user.id, "shared", theirs.id) is not None
        assert repo.get_by_key(user.id, "shared").order_id == order.id
        assert repo.get_by_key(other_user.id, "shared").order_id == theirs.id

    def test_release_only_drops_in_flight_claims(self, repo, user, order):
        done = repo.claim(user.id, "done", order.id)
        repo.complete(done, 201, {"message": "ok"})
        repo.claim(user.id, "pending", order.id)

        assert repo.release(user.id, "done") == 0
        assert repo.release(user.id, "pending") == 1
        assert repo.get_by_key(user.id, "done") is not None
        assert repo.get_by_key(user.id, "pending") is None

    def test_delete_expired(self, db_session, repo, user, order):
        old = repo.claim(user.id, "old", order.id)
        old.created_at = datetime.now(UTC) - timedelta(hours=25)  # type: ignore[assignment]
        db_session.commit()
        repo.claim(user.id, "new", order.id)

        assert repo.delete_expired(max_age_hours=24) == 1
        assert repo.get_by_key(user.id, "old") is None
        assert repo.get_by_key(user.id, "new") is not None


class TestClaimIdempotencyKey:
    def test_no_header_returns_none(self, db_session, user, order):
        assert claim_idempotency_key(_make_request(), db_session, user.id, order.id) is None

    def test_blank_header_returns_none(self, db_session, user, order):
        request = _make_request(headers={"Idempotency-Key": "   "})
        assert claim_idempotency_key(request, db_session, user.id, order.id) is None

    def test_overlong_key_is_rejected(self, db_session, user, order):
        request = _make_request(headers={"Idempotency-Key": "k" * 256})
        with pytest.raises(ValidationError):
            claim_idempotency_key(request, db_session, user.id, order.id)

    def test_new_key_is_claimed_for_the_order(self, db_session, repo, user, order):
        request = _make_request(headers={"Idempotency-Key": "new-key"})

        claim = claim_idempotency_key(request, db_session, user.id, order.id)

        assert claim == IdempotencyClaim(user_id=user.id, key="new-key", order_id=order.id)
        record = repo.get_by_key(user.id, "new-key")
        assert record.order_id == order.id
        assert record.response_status is None

    def test_unknown_order_claims_nothing(self, db_session, repo, user):
        request = _make_request(headers={"Idempotency-Key": "nowhere"})
        with pytest.raises(NotFoundError):
            claim_idempotency_key(request, db_session, user.id, uuid.uuid4())
        assert repo.get_by_key(user.id, "nowhere") is None

    def test_other_users_order_claims_nothing(self, db_session, repo, user, other_user):
        theirs = make_order(db_session, other_user)
        request = _make_request(headers={"Idempotency-Key": "borrowed"})
        with pytest.raises(NotFoundError):
            claim_idempotency_key(request, db_session, user.id, theirs.id)

    def test_in_flight_key_is_a_conflict(self, db_session, repo, user, order):
        repo.claim(user.id, "busy", order.id)
        request = _make_request(headers={"Idempotency-Key": "busy"})
        with pytest.raises(ConflictError):
            claim_idempotency_key(request, db_session, user.id, order.id)

    def test_key_reused_for_another_order(self, db_session, repo, user, order):
        repo.claim(user.id, "first-order", order.id)
        another = make_order(db_session, user)
        request = _make_request(headers={"Idempotency-Key": "first-order"})

        with pytest.raises(ValidationError) as exc:
            claim_idempotency_key(request, db_session, user.id, another.id)

        assert "different order" in exc.value.message

    def test_completed_key_replays(self, db_session, user, order):
        request = _make_request(headers={"Idempotency-Key": "done"})
        claim = claim_idempotency_key(request, db_session, user.id, order.id)
        complete_idempotency_key(db_session, claim, 201, {"message": "ok", "data": {}})

        result = claim_idempotency_key(request, db_session, user.id, order.id)

        assert isinstance(result, JSONResponse)
        assert result.status_code == 201
        assert result.headers.get("Idempotency-Replayed") == "true"
        assert result.body == b'{"message":"ok","data":{}}'

    def test_released_key_can_be_claimed_again(self, db_session, user, order):
        request = _make_request(headers={"Idempotency-Key": "retry"})
        claim = claim_idempotency_key(request, db_session, user.id, order.id)
        release_idempotency_key(db_session, claim)

        assert claim_idempotency_key(request, db_session, user.id, order.id) == claim

    def test_completing_a_released_claim_is_a_no_op(self, db_session, repo, user, order):
        claim = IdempotencyClaim(user_id=user.id, key="missing", order_id=order.id)
        complete_idempotency_key(db_session, claim, 201, {"message": "x"})
        assert repo.get_by_key(user.id, "missing") is None
