"""Tests for categories and products."""

import uuid
from decimal import Decimal

from storefront.models.product import Category, Product, ProductType, ProductVariant, Subcategory
from storefront.repositories.product_repository import ProductFilters, ProductRepository
from tests.conftest import make_product


def _category(db_session, name="Apparel", display_order=0):
    category = Category(name=name, display_order=display_order)
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


class TestCategories:
    def test_list_in_display_order(self, client, db_session):
        _category(db_session, "Kitchen", display_order=2)
        _category(db_session, "Apparel", display_order=1)

        response = client.get("/categories")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["name"] for c in data["categories"]] == ["Apparel", "Kitchen"]
        assert data["pagination"]["total"] == 2

    def test_create_requires_auth(self, client):
        response = client.post("/categories", json={"name": "Books"})
        assert response.status_code == 401

    def test_create(self, client, auth_headers):
        response = client.post(
            "/categories", json={"name": "  Books ", "display_order": 3}, headers=auth_headers
        )
        assert response.status_code == 201
        category = response.json()["data"]["category"]
        assert category["name"] == "Books"
        assert category["display_order"] == 3

    def test_duplicate_name(self, client, db_session, auth_headers):
        _category(db_session, "Books")
        response = client.post("/categories", json={"name": "Books"}, headers=auth_headers)
        assert response.status_code == 409


class TestProducts:
    def test_create_with_variants(self, client, auth_headers, db_session):
        category = _category(db_session)

        response = client.post(
            "/products",
            json={
                "name": "Linen Shirt",
                "category_id": str(category.id),
                "base_price": "499.00",
                "variants": [
                    {"sku": "LIN-M", "price": "499.00", "size": "M"},
                    {"sku": "LIN-L", "price": "549.00", "size": "L"},
                ],
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        product = response.json()["data"]["product"]
        assert product["category_id"] == str(category.id)
        assert {v["sku"] for v in product["variants"]} == {"LIN-M", "LIN-L"}
        assert all(v["bought_count"] == 0 for v in product["variants"])

    def test_existing_sku_conflicts(self, client, db_session, auth_headers):
        make_product(db_session, skus=("LIN-M",))
        response = client.post(
            "/products",
            json={
                "name": "Another Shirt",
                "base_price": "10.00",
                "variants": [{"sku": "LIN-M", "price": "10.00"}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert "LIN-M" in response.json()["message"]

    def test_duplicate_sku_in_payload(self, client, auth_headers):
        response = client.post(
            "/products",
            json={
                "name": "Shirt",
                "base_price": "10.00",
                "variants": [
                    {"sku": "DUP-1", "price": "10.00"},
                    {"sku": "DUP-1", "price": "12.00"},
                ],
            },
            headers=auth_headers,
        )
        assert response.status_code == 409

    def test_unknown_category(self, client, auth_headers):
        response = client.post(
            "/products",
            json={"name": "Shirt", "base_price": "10.00", "category_id": str(uuid.uuid4())},
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Category not found"

    def test_list_filters(self, client, db_session):
        apparel = _category(db_session, "Apparel")
        make_product(db_session, name="Linen Shirt", skus=("A-1",), category=apparel)
        make_product(db_session, name="Steel Mug", skus=("B-1",))

        by_category = client.get("/products", params={"category_id": str(apparel.id)})
        by_search = client.get("/products", params={"search": "mug"})

        assert [p["name"] for p in by_category.json()["data"]["products"]] == ["Linen Shirt"]
        assert [p["name"] for p in by_search.json()["data"]["products"]] == ["Steel Mug"]

    def test_get_product(self, client, db_session):
        product = make_product(db_session)
        response = client.get(f"/products/{product.id}")
        assert response.status_code == 200
        assert response.json()["data"]["product"]["variants"][0]["sku"] == "SHIRT-M"

    def test_get_unknown_product(self, client):
        response = client.get(f"/products/{uuid.uuid4()}")
        assert response.status_code == 404

    def test_malformed_product_id(self, client):
        response = client.get("/products/not-a-uuid")
        assert response.status_code == 422
        assert response.json()["errorType"] == "ValidationError"


class TestCategorySearch:
    def test_search_by_name_or_description(self, client, db_session):
        _category(db_session, "Footwear")
        kitchen = _category(db_session, "Kitchen")
        kitchen.description = "Pans, mugs and shoe racks"
        db_session.commit()
        _category(db_session, "Books")

        response = client.get("/categories", params={"search": "SHOE"})

        names = [c["name"] for c in response.json()["data"]["categories"]]
        assert sorted(names) == ["Footwear", "Kitchen"]


class TestProductPlacement:
    def _tree(self, db_session):
        footwear = _category(db_session, "Footwear")
        sports = Subcategory(category_id=footwear.id, name="Sports shoes")
        db_session.add(sports)
        db_session.commit()
        running = ProductType(subcategory_id=sports.id, name="Running", slug="running")
        db_session.add(running)
        db_session.commit()
        return footwear, sports, running

    def _payload(self, **placement):
        return {
            "name": "Racer",
            "base_price": "2999.00",
            "variants": [{"sku": "RACER-9", "price": "2999.00", "size": "9"}],
            **{key: str(value) for key, value in placement.items()},
        }

    def test_create_with_full_placement(self, client, db_session, auth_headers):
        footwear, sports, running = self._tree(db_session)

        response = client.post(
            "/products",
            json=self._payload(
                category_id=footwear.id, subcategory_id=sports.id, product_type_id=running.id
            ),
            headers=auth_headers,
        )

        assert response.status_code == 201
        product = response.json()["data"]["product"]
        assert product["subcategory_id"] == str(sports.id)
        assert product["product_type_id"] == str(running.id)

        listed = client.get("/products", params={"product_type_id": str(running.id)})
        assert [p["name"] for p in listed.json()["data"]["products"]] == ["Racer"]
        by_subcategory = client.get("/products", params={"subcategory_id": str(sports.id)})
        assert by_subcategory.json()["data"]["pagination"]["total"] == 1

    def test_mismatched_levels(self, client, db_session, auth_headers):
        _, sports, _ = self._tree(db_session)
        kitchen = _category(db_session, "Kitchen")

        response = client.post(
            "/products",
            json=self._payload(category_id=kitchen.id, subcategory_id=sports.id),
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["message"] == "Subcategory does not belong to the category"

    def test_unknown_product_type(self, client, auth_headers):
        response = client.post(
            "/products",
            json=self._payload(product_type_id=uuid.uuid4()),
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Product type not found"


class TestProductFilters:
    def _shoe(self, db_session, name, variants, brand=None, description=None):
        product = Product(
            name=name, base_price=Decimal("100.00"), brand=brand, description=description
        )
        product.variants = [
            ProductVariant(
                sku=f"{name}-{index}",
                price=Decimal(price),
                discounted_price=Decimal(discounted) if discounted else None,
                color=color,
                size=size,
                stock=stock,
            )
            for index, (price, discounted, color, size, stock) in enumerate(variants)
        ]
        db_session.add(product)
        db_session.commit()
        return product

    def _names(self, db_session, **filters):
        repo = ProductRepository(db_session)
        return sorted(p.name for p in repo.get_all(filters=ProductFilters(**filters)))

    def test_terms_match_brand_or_description(self, db_session):
        self._shoe(db_session, "Racer", [("900", None, None, None, 1)], brand="Swift")
        self._shoe(db_session, "Plain", [("900", None, None, None, 1)], description="swift feet")
        self._shoe(db_session, "Other", [("900", None, None, None, 1)])

        assert self._names(db_session, terms=("swift",)) == ["Plain", "Racer"]

    def test_price_uses_discounted_price(self, db_session):
        self._shoe(db_session, "Sale", [("3000", "1200", None, None, 1)])
        self._shoe(db_session, "Full", [("3000", None, None, None, 1)])

        assert self._names(db_session, price_max=Decimal("1500")) == ["Sale"]
        assert self._names(db_session, price_min=Decimal("2000")) == ["Full"]

    def test_size_and_price_hold_on_one_variant(self, db_session):
        # Size 9 exists but only above the price ceiling
        self._shoe(
            db_session,
            "Split",
            [("500", None, None, "8", 1), ("5000", None, None, "9", 1)],
        )
        self._shoe(db_session, "Match", [("800", None, None, "9", 1)])

        found = self._names(db_session, sizes=("9",), price_max=Decimal("1000"))

        assert found == ["Match"]

    def test_colour_matches_variant_or_text(self, db_session):
        self._shoe(db_session, "Racer", [("900", None, "Red", None, 1)])
        self._shoe(db_session, "Red Runner", [("900", None, "Blue", None, 1)])
        self._shoe(db_session, "Plain", [("900", None, "Black", None, 1)])

        assert self._names(db_session, colors=("red",)) == ["Racer", "Red Runner"]

    def test_stock(self, db_session):
        self._shoe(db_session, "Stocked", [("900", None, None, None, 3)])
        self._shoe(db_session, "Empty", [("900", None, None, None, 0)])

        assert self._names(db_session, in_stock=True) == ["Stocked"]
        assert self._names(db_session, in_stock=False) == ["Empty"]

    def test_list_search_matches_brand(self, client, db_session):
        self._shoe(db_session, "Racer", [("900", None, None, None, 1)], brand="Swift")

        response = client.get("/products", params={"search": "swift"})

        assert [p["name"] for p in response.json()["data"]["products"]] == ["Racer"]
