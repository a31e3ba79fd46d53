"""Tests for orders: creation, bought counts and lifecycle rules."""

import json
import logging
import uuid
from decimal import Decimal

import pytest

from storefront.core.errors import NotFoundError, ValidationError
from storefront.models.order import Order
from storefront.models.product import ProductVariant
from storefront.schemas.order import OrderCreate, OrderItemCreate, OrderUpdate
from storefront.services.order_service import (
    OrderService,
    resolve_variant_sku,
    sku_from_variant_info,
)
from tests.conftest import make_order, make_product

SHIPPING = {"line1": "12 MG Road", "city": "Pune", "pincode": "411001"}


def _order_payload(items, **overrides):
    payload = {"shipping_address": SHIPPING, "items": items, "payment_method": "CARD"}
    payload.update(overrides)
    return payload


def _bought(db_session, sku):
    db_session.expire_all()
    return db_session.query(ProductVariant).filter(ProductVariant.sku == sku).one().bought_count


class TestSkuResolution:
    @pytest.mark.parametrize(
        "variant_info, expected",
        [
            ("SHIRT-M", "SHIRT-M"),
            ('{"sku": "SHIRT-L"}', "SHIRT-L"),
            ({"variantSku": "SHIRT-S"}, "SHIRT-S"),
            ({"productVariant": {"sku": "SHIRT-XL"}}, "SHIRT-XL"),
            ("  ", None),
            ({"color": "red"}, None),
            (None, None),
        ],
    )
    def test_from_variant_info(self, variant_info, expected):
        assert sku_from_variant_info(variant_info) == expected

    def test_falls_back_to_snapshot(self):
        item = OrderItemCreate(
            product_snapshot={"name": "Shirt", "selectedVariant": {"sku": "SHIRT-M"}},
            price=Decimal("10.00"),
            quantity=1,
        )
        assert resolve_variant_sku(item) == "SHIRT-M"

    def test_variant_info_wins_over_snapshot(self):
        item = OrderItemCreate(
            product_snapshot={"sku": "FROM-SNAPSHOT"},
            price=Decimal("10.00"),
            quantity=1,
            variant_info="FROM-INFO",
        )
        assert resolve_variant_sku(item) == "FROM-INFO"


class TestOrderService:
    def test_create_computes_subtotals_and_total(self, db_session, user):
        order = OrderService(db_session).create(
            user.id,
            OrderCreate(
                **_order_payload(
                    [
                        {"product_snapshot": {"name": "Mug"}, "price": "10.00", "quantity": 2},
                        {"product_snapshot": {"name": "Pen"}, "price": "5.50", "quantity": 1},
                    ]
                )
            ),
        )

        assert order.total_amount == Decimal("25.50")
        assert sorted(item.subtotal for item in order.order_items) == [
            Decimal("5.50"),
            Decimal("20.00"),
        ]
        assert order.status == "PENDING"
        assert order.payment_status == "PENDING"

    def test_explicit_total_is_kept(self, db_session, user):
        order = OrderService(db_session).create(
            user.id,
            OrderCreate(
                **_order_payload(
                    [{"product_snapshot": {"name": "Mug"}, "price": "10.00", "quantity": 2}],
                    total_amount="18.00",
                    promocode="SAVE2",
                )
            ),
        )
        assert order.total_amount == Decimal("18.00")
        assert order.promocode == "SAVE2"

    def test_increments_bought_counts(self, db_session, user):
        make_product(db_session, skus=("SHIRT-M", "SHIRT-L"))

        OrderService(db_session).create(
            user.id,
            OrderCreate(
                **_order_payload(
                    [
                        {
                            "product_snapshot": {"name": "Shirt"},
                            "price": "499.00",
                            "quantity": 2,
                            "variant_info": "SHIRT-M",
                        },
                        {
                            "product_snapshot": {"name": "Shirt", "variantSku": "SHIRT-M"},
                            "price": "499.00",
                            "quantity": 1,
                        },
                        {
                            "product_snapshot": {"name": "Shirt"},
                            "price": "499.00",
                            "quantity": 3,
                            "variant_info": {"sku": "SHIRT-L"},
                        },
                    ]
                )
            ),
        )

        assert _bought(db_session, "SHIRT-M") == 3
        assert _bought(db_session, "SHIRT-L") == 3

    def test_unknown_sku_is_skipped_with_warning(self, db_session, user, caplog):
        make_product(db_session, skus=("SHIRT-M",))

        with caplog.at_level(logging.WARNING, logger="storefront.services.order_service"):
            order = OrderService(db_session).create(
                user.id,
                OrderCreate(
                    **_order_payload(
                        [
                            {
                                "product_snapshot": {"name": "Ghost"},
                                "price": "10.00",
                                "quantity": 1,
                                "variant_info": "GONE-1",
                            },
                            {
                                "product_snapshot": {"name": "Shirt"},
                                "price": "499.00",
                                "quantity": 1,
                                "variant_info": "SHIRT-M",
                            },
                        ]
                    )
                ),
            )

        assert db_session.get(Order, order.id) is not None
        assert _bought(db_session, "SHIRT-M") == 1
        assert "GONE-1" in caplog.text

    def test_dict_variant_info_is_stored_as_json(self, db_session, user):
        order = OrderService(db_session).create(
            user.id,
            OrderCreate(
                **_order_payload(
                    [
                        {
                            "product_snapshot": {"name": "Shirt"},
                            "price": "10.00",
                            "quantity": 1,
                            "variant_info": {"sku": "SHIRT-M", "size": "M"},
                        }
                    ]
                )
            ),
        )
        assert json.loads(order.order_items[0].variant_info) == {"sku": "SHIRT-M", "size": "M"}

    def test_get_other_users_order(self, db_session, user, other_user):
        order = make_order(db_session, other_user)
        with pytest.raises(NotFoundError, match="Order not found"):
            OrderService(db_session).get(user.id, order.id)

    def test_update_status_and_rating(self, db_session, user):
        order = make_order(db_session, user)
        updated = OrderService(db_session).update(
            user.id, order.id, OrderUpdate(status="shipped", rating="very_good")
        )
        assert updated.status == "SHIPPED"
        assert updated.rating == "VERY_GOOD"

    def test_empty_update(self, db_session, user):
        order = make_order(db_session, user)
        with pytest.raises(ValidationError, match="Nothing to update"):
            OrderService(db_session).update(user.id, order.id, OrderUpdate())

    def test_paid_order_cannot_be_deleted(self, db_session, user):
        order = make_order(db_session, user, payment_status="PAID")
        with pytest.raises(ValidationError, match="Paid orders cannot be deleted") as exc_info:
            OrderService(db_session).delete(user.id, order.id)
        assert exc_info.value.status_code == 400
        assert db_session.get(Order, order.id) is not None

    def test_trackable_orders(self, db_session, user):
        shipped = make_order(db_session, user, status="SHIPPED")
        make_order(db_session, user, status="DELIVERED")
        make_order(db_session, user, status="CANCELLED")

        orders, pagination = OrderService(db_session).list_trackable(user.id)

        assert [o.id for o in orders] == [shipped.id]
        assert pagination["total"] == 1


class TestOrdersApi:
    def test_create_order(self, client, auth_headers):
        response = client.post(
            "/orders",
            json=_order_payload(
                [
                    {"product_snapshot": {"name": "Mug"}, "price": "10.00", "quantity": 2},
                    {"product_snapshot": {"name": "Pen"}, "price": "5.50", "quantity": 1},
                ]
            ),
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created successfully"
        order = body["data"]["order"]
        assert Decimal(order["total_amount"]) == Decimal("25.50")
        assert len(order["order_items"]) == 2

    def test_empty_items_rejected(self, client, auth_headers):
        response = client.post("/orders", json=_order_payload([]), headers=auth_headers)
        assert response.status_code == 422
        assert response.json()["errorType"] == "ValidationError"

    def test_list_orders(self, client, db_session, user, other_user, auth_headers):
        make_order(db_session, user)
        make_order(db_session, user)
        make_order(db_session, other_user)

        response = client.get("/orders", params={"limit": "1"}, headers=auth_headers)

        data = response.json()["data"]
        assert len(data["orders"]) == 1
        assert data["pagination"]["total"] == 2
        assert data["pagination"]["has_next_page"] is True

    def test_get_order(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)
        response = client.get(f"/orders/{order.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["order"]["id"] == str(order.id)

    def test_get_unknown_order(self, client, auth_headers):
        response = client.get(f"/orders/{uuid.uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"

    def test_update_order(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)
        response = client.patch(
            f"/orders/{order.id}", json={"status": "confirmed"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["order"]["status"] == "CONFIRMED"

    def test_invalid_status(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)
        response = client.patch(
            f"/orders/{order.id}", json={"status": "TELEPORTED"}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_delete_unpaid_order(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user)
        response = client.delete(f"/orders/{order.id}", headers=auth_headers)
        assert response.status_code == 200
        assert db_session.query(Order).filter(Order.id == order.id).count() == 0

    def test_delete_paid_order(self, client, db_session, user, auth_headers):
        order = make_order(db_session, user, payment_status="PAID")
        response = client.delete(f"/orders/{order.id}", headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {
            "message": "Paid orders cannot be deleted",
            "errorType": "ValidationError",
            "status": 400,
        }
