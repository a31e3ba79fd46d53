"""Tests for catalog search and its query hints."""

from decimal import Decimal

import pytest

from storefront.core.errors import ValidationError
from storefront.models.product import Category, Product, ProductVariant, Subcategory
from storefront.services.search_service import (
    extract_attributes,
    extract_price_range,
    extract_search_term,
    parse_bool,
)


class TestExtractSearchTerm:
    def test_first_non_blank_alias(self):
        assert extract_search_term({"q": "  ", "term": " shoes "}) == "shoes"

    def test_missing(self):
        with pytest.raises(ValidationError):
            extract_search_term({"sections": "products"})


class TestExtractPriceRange:
    @pytest.mark.parametrize(
        ("text", "price_min", "price_max", "rest"),
        [
            ("running shoes under 2k", None, "2000", "running shoes"),
            ("shirts above ₹500", "500", None, "shirts"),
            ("rs 500 to 1500", "500", "1500", ""),
            ("jeans between 3000 and 1000", "1000", "3000", "jeans"),
            ("watch 1.5k", "1500", None, "watch"),
            ("sofa 800-1200", "800", "1200", "sofa"),
        ],
    )
    def test_hints(self, text, price_min, price_max, rest):
        price = extract_price_range(text)

        assert price.price_min == (Decimal(price_min) if price_min else None)
        assert price.price_max == (Decimal(price_max) if price_max else None)
        assert price.text == rest

    def test_without_prices_text_is_untouched(self):
        price = extract_price_range("Blue T-Shirt")
        assert (price.text, price.price_min, price.price_max) == ("Blue T-Shirt", None, None)

    def test_size_number_is_not_a_price(self):
        price = extract_price_range("shoes size 9 under 3000")

        assert price.price_max == Decimal("3000")
        assert price.price_min is None
        assert price.text == "shoes size 9"

    def test_numbers_inside_words_are_ignored(self):
        assert extract_price_range("ps5 console").price_min is None


class TestExtractAttributes:
    def test_colours_sizes_and_terms(self):
        attributes = extract_attributes("Red T-Shirt XL")

        assert attributes.colors == ("red",)
        assert attributes.sizes == ("xl",)
        assert attributes.terms == ("t-shirt",)

    def test_explicit_size_and_plurals(self):
        attributes = extract_attributes("shoes size 9")

        assert attributes.sizes == ("9",)
        assert attributes.terms == ("shoe",)

    def test_single_letter_sizes_need_context(self):
        assert extract_attributes("m&m candy").sizes == ()
        assert extract_attributes("shirt m").sizes == ("m",)

    def test_duplicates_collapse(self):
        attributes = extract_attributes("red red shirt shirts")

        assert attributes.colors == ("red",)
        assert attributes.terms == ("shirt",)


class TestParseBool:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("1", True), ("No", False), ("maybe", None), (None, None)],
    )
    def test_values(self, raw, expected):
        assert parse_bool(raw) is expected


def _product(db_session, name, price, color=None, size=None, stock=5):
    product = Product(name=name, base_price=Decimal(price))
    product.variants = [
        ProductVariant(
            sku=f"{name}-{color}-{size}",
            price=Decimal(price),
            color=color,
            size=size,
            stock=stock,
        )
    ]
    db_session.add(product)
    db_session.commit()
    return product


class TestSearchApi:
    def test_hints_become_product_filters(self, client, db_session):
        _product(db_session, "Racer Shoe", "1500", color="Red")
        _product(db_session, "Racer Shoe Pro", "2500", color="Red")
        _product(db_session, "Trail Shoe", "1000", color="Blue")
        _product(db_session, "Red Mug", "100", color="Red")

        response = client.get("/search", params={"q": "red shoes under 2k"})

        assert response.status_code == 200
        data = response.json()["data"]
        products = data["sections"]["products"]["items"]
        assert [p["name"] for p in products] == ["Racer Shoe"]
        applied = data["meta"]["filters"]
        assert applied["terms"] == ["shoe"]
        assert applied["colors"] == ["red"]
        assert Decimal(applied["price_max"]) == Decimal("2000")
        assert applied["price_min"] is None

    def test_sizes_filter_variants(self, client, db_session):
        _product(db_session, "Runner", "900", size="9")
        _product(db_session, "Walker", "900", size="10")

        response = client.get("/search", params={"q": "shoes size 9", "sections": "products"})
        assert response.json()["data"]["sections"]["products"]["items"] == []

        response = client.get("/search", params={"q": "runner size 9", "sections": "products"})
        assert [p["name"] for p in response.json()["data"]["sections"]["products"]["items"]] == [
            "Runner"
        ]

    def test_category_and_subcategory_sections(self, client, db_session):
        shoes = Category(name="Shoes")
        db_session.add_all([shoes, Category(name="Kitchen")])
        db_session.commit()
        db_session.add(Subcategory(category_id=shoes.id, name="Sports shoes"))
        db_session.commit()

        response = client.get(
            "/search", params={"search": "shoes", "sections": "categories,subcategories"}
        )

        data = response.json()["data"]
        assert list(data["sections"]) == ["categories", "subcategories"]
        assert [c["name"] for c in data["sections"]["categories"]["items"]] == ["Shoes"]
        assert [s["name"] for s in data["sections"]["subcategories"]["items"]] == ["Sports shoes"]
        assert data["meta"]["total_item_count"] == 2

    def test_unknown_sections_search_everything(self, client):
        response = client.get("/search", params={"q": "anything", "sections": "bogus"})
        assert set(response.json()["data"]["sections"]) == {
            "categories",
            "subcategories",
            "products",
        }

    def test_sections_page_on_their_own(self, client, db_session):
        for index in range(3):
            _product(db_session, f"Mug {index}", "100")

        response = client.get(
            "/search",
            params={
                "q": "mug",
                "sections": "products",
                "products_limit": "2",
                "products_page": "2",
            },
        )

        section = response.json()["data"]["sections"]["products"]
        assert len(section["items"]) == 1
        assert section["pagination"]["total"] == 3
        assert section["pagination"]["page"] == 2

    def test_explicit_price_wins(self, client, db_session):
        _product(db_session, "Racer Shoe", "2500")

        response = client.get("/search", params={"q": "shoe under 2k", "price_max": "3000"})

        data = response.json()["data"]
        assert Decimal(data["meta"]["filters"]["price_max"]) == Decimal("3000")
        assert data["sections"]["products"]["pagination"]["total"] == 1

    def test_in_stock(self, client, db_session):
        _product(db_session, "Mug A", "100", stock=0)
        _product(db_session, "Mug B", "100", stock=2)

        response = client.get("/search", params={"q": "mug", "in_stock": "true"})

        items = response.json()["data"]["sections"]["products"]["items"]
        assert [p["name"] for p in items] == ["Mug B"]

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"q": "   "},
            {"q": "mug", "category_id": "not-a-uuid"},
            {"q": "mug", "price_min": "cheap"},
            {"q": "mug", "price_min": "-5"},
            {"q": "mug", "price_min": "500", "price_max": "100"},
        ],
    )
    def test_invalid_queries(self, client, params):
        response = client.get("/search", params=params)

        assert response.status_code == 422
        assert response.json()["errorType"] == "ValidationError"
