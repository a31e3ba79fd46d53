"""Services that define a ``list`` method still resolve ``list[...]`` annotations."""

import inspect
import typing

import pytest

from storefront.services.address_service import AddressService
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.services.payment_card_service import PaymentCardService
from storefront.services.wishlist_service import WishlistService


@pytest.mark.parametrize(
    "service", [OrderService, PaymentCardService, CartService, AddressService, WishlistService]
)
def test_method_annotations_resolve(service):
    methods = [member for member in vars(service).values() if inspect.isfunction(member)]

    hints = {method.__name__: typing.get_type_hints(method) for method in methods}

    assert "list" in hints
    assert typing.get_origin(hints["list"]["return"]) is tuple


def test_order_item_annotations_use_the_builtin_list():
    hints = typing.get_type_hints(OrderService._increment_bought_counts)
    assert typing.get_origin(hints["items"]) is list
