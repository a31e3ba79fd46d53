"""Tests for the address book API and service."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from storefront.core.errors import ConflictError, ValidationError
from storefront.models.address import Address
from storefront.schemas.address import AddressCreate
from storefront.services.address_service import AddressService

HOME = {
    "line1": "12 MG Road",
    "line2": "Near City Mall",
    "city": "Pune",
    "state": "Maharashtra",
    "zip_code": "411001",
}


def _address(**overrides) -> dict:
    return {**HOME, **overrides}


def make_address(db, user, line1, is_default=False, updated_minutes_ago=0) -> Address:
    stamp = datetime.now(UTC) - timedelta(minutes=updated_minutes_ago)
    address = Address(
        user_id=user.id,
        line1=line1,
        city="Pune",
        state="Maharashtra",
        zip_code="411001",
        is_default=is_default,
        created_at=stamp,
        updated_at=stamp,
    )
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def _defaults(db_session, user) -> list[Address]:
    db_session.expire_all()
    return (
        db_session.query(Address)
        .filter(Address.user_id == user.id, Address.is_default.is_(True))
        .all()
    )


class TestCreateAddress:
    def test_first_address_becomes_default(self, client, auth_headers):
        response = client.post("/addresses", json=_address(), headers=auth_headers)

        assert response.status_code == 201
        address = response.json()["data"]["address"]
        assert address["is_default"] is True
        assert address["country"] == "India"
        assert address["address_type"] == "home"

    def test_later_address_is_not_default_unless_asked(
        self, client, db_session, user, auth_headers
    ):
        first = make_address(db_session, user, "1 First Street", is_default=True)

        plain = client.post("/addresses", json=_address(line1="2 Second St"), headers=auth_headers)
        assert plain.json()["data"]["address"]["is_default"] is False

        chosen = client.post(
            "/addresses",
            json=_address(line1="3 Third St", is_default=True),
            headers=auth_headers,
        )
        assert chosen.json()["data"]["address"]["is_default"] is True
        defaults = _defaults(db_session, user)
        assert [str(a.id) for a in defaults] == [chosen.json()["data"]["address"]["id"]]
        assert defaults[0].id != first.id

    def test_duplicate_lines_ignore_case(self, client, auth_headers):
        client.post("/addresses", json=_address(), headers=auth_headers)

        response = client.post(
            "/addresses",
            json=_address(line1="12 mg road", line2="NEAR CITY MALL", city="Mumbai"),
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Address already exists"

    def test_missing_line2_only_matches_missing_line2(self, client, auth_headers):
        client.post("/addresses", json=_address(line2=None), headers=auth_headers)

        same = client.post("/addresses", json=_address(line2="  "), headers=auth_headers)
        different = client.post("/addresses", json=_address(), headers=auth_headers)

        assert same.status_code == 409
        assert different.status_code == 201

    def test_type_is_case_insensitive(self, client, auth_headers):
        response = client.post(
            "/addresses", json=_address(address_type="WORK"), headers=auth_headers
        )
        assert response.json()["data"]["address"]["address_type"] == "work"

    @pytest.mark.parametrize(
        "overrides",
        [{"zip_code": "4110"}, {"zip_code": "41100a"}, {"address_type": "office"}, {"city": ""}],
    )
    def test_invalid_fields(self, client, auth_headers, overrides):
        response = client.post("/addresses", json=_address(**overrides), headers=auth_headers)
        assert response.status_code == 422

    def test_requires_auth(self, client):
        assert client.post("/addresses", json=_address()).status_code == 401


class TestListAddresses:
    def test_default_first_then_recently_updated(self, client, db_session, user, auth_headers):
        make_address(db_session, user, "Old", updated_minutes_ago=30)
        make_address(db_session, user, "Home", is_default=True, updated_minutes_ago=60)
        make_address(db_session, user, "Recent", updated_minutes_ago=5)

        response = client.get("/addresses", headers=auth_headers)

        data = response.json()["data"]
        assert [a["line1"] for a in data["addresses"]] == ["Home", "Recent", "Old"]
        assert data["pagination"]["total"] == 3

    def test_only_own_addresses(self, client, db_session, other_user, auth_headers):
        make_address(db_session, other_user, "Theirs")

        response = client.get("/addresses", headers=auth_headers)

        assert response.json()["data"]["addresses"] == []

    def test_default_endpoint(self, client, db_session, user, auth_headers):
        assert client.get("/addresses/default", headers=auth_headers).json()["data"] == {
            "address": None
        }
        make_address(db_session, user, "Home", is_default=True)

        response = client.get("/addresses/default", headers=auth_headers)

        assert response.json()["data"]["address"]["line1"] == "Home"

    def test_other_users_address_is_not_found(
        self, client, db_session, other_user, auth_headers
    ):
        theirs = make_address(db_session, other_user, "Theirs")
        assert client.get(f"/addresses/{theirs.id}", headers=auth_headers).status_code == 404


class TestUpdateAddress:
    def test_partial_update(self, client, db_session, user, auth_headers):
        address = make_address(db_session, user, "Home", is_default=True)

        response = client.patch(
            f"/addresses/{address.id}",
            json={"city": "Nashik", "building_name": "Sai Heights"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()["data"]["address"]
        assert body["city"] == "Nashik"
        assert body["building_name"] == "Sai Heights"
        assert body["line1"] == "Home"

    def test_setting_default_moves_it(self, client, db_session, user, auth_headers):
        make_address(db_session, user, "Home", is_default=True)
        work = make_address(db_session, user, "Work")

        client.patch(f"/addresses/{work.id}", json={"is_default": True}, headers=auth_headers)

        assert [a.id for a in _defaults(db_session, user)] == [work.id]

    def test_unsetting_default_leaves_none(self, client, db_session, user, auth_headers):
        home = make_address(db_session, user, "Home", is_default=True)

        client.patch(f"/addresses/{home.id}", json={"is_default": False}, headers=auth_headers)

        assert _defaults(db_session, user) == []

    def test_update_into_duplicate(self, client, db_session, user, auth_headers):
        make_address(db_session, user, "Home")
        work = make_address(db_session, user, "Work")

        response = client.patch(
            f"/addresses/{work.id}", json={"line1": "HOME"}, headers=auth_headers
        )

        assert response.status_code == 409

    def test_empty_update_is_rejected(self, client, db_session, user, auth_headers):
        home = make_address(db_session, user, "Home")
        response = client.patch(f"/addresses/{home.id}", json={}, headers=auth_headers)
        assert response.status_code == 422

    def test_unknown_address(self, client, auth_headers):
        response = client.patch(
            f"/addresses/{uuid.uuid4()}", json={"city": "Goa"}, headers=auth_headers
        )
        assert response.status_code == 404


class TestDeleteAddress:
    def test_deleting_default_promotes_most_recent(self, client, db_session, user, auth_headers):
        home = make_address(db_session, user, "Home", is_default=True)
        make_address(db_session, user, "Old", updated_minutes_ago=30)
        recent = make_address(db_session, user, "Recent", updated_minutes_ago=5)

        response = client.delete(f"/addresses/{home.id}", headers=auth_headers)

        assert response.status_code == 200
        assert [a.id for a in _defaults(db_session, user)] == [recent.id]

    def test_deleting_last_address(self, client, db_session, user, auth_headers):
        home = make_address(db_session, user, "Home", is_default=True)

        client.delete(f"/addresses/{home.id}", headers=auth_headers)

        assert client.get("/addresses", headers=auth_headers).json()["data"]["addresses"] == []

    def test_other_users_address(self, client, db_session, other_user, auth_headers):
        theirs = make_address(db_session, other_user, "Theirs")
        assert client.delete(f"/addresses/{theirs.id}", headers=auth_headers).status_code == 404


class TestAddressService:
    def test_update_clearing_optional_lines(self, db_session, user):
        service = AddressService(db_session)
        address = service.create(user.id, AddressCreate(**_address(building_name="Sai Heights")))

        updated = service.update(user.id, address.id, {"line2": None, "building_name": None})

        assert updated.line2 is None
        assert updated.building_name is None

    def test_required_fields_cannot_be_cleared(self, db_session, user):
        service = AddressService(db_session)
        address = service.create(user.id, AddressCreate(**_address()))

        with pytest.raises(ValidationError):
            service.update(user.id, address.id, {"city": None})

    def test_duplicate_is_a_conflict(self, db_session, user):
        service = AddressService(db_session)
        service.create(user.id, AddressCreate(**_address()))

        with pytest.raises(ConflictError):
            service.create(user.id, AddressCreate(**_address(city="Mumbai")))
