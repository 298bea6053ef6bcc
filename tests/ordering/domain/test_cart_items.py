"""Tests for the CartLineItem value object and its persisted form."""

import pytest
from ordering.cart.items import (
    DEFAULT_CATEGORY,
    DEFAULT_IMAGE,
    DEFAULT_RETURN_POLICY,
    CartLineItem,
)
from protean.exceptions import ValidationError


class TestSnapshotFromProduct:
    def test_captures_display_fields(self, make_product):
        product = make_product(
            category="Electronics",
            image_urls=["products/earbuds.jpg", "products/earbuds-2.jpg"],
            return_policy="30 days",
        )

        line = CartLineItem.from_product(product, quantity=2)

        assert line.product_id == "prod-001"
        assert line.name == "Wireless Earbuds"
        assert line.unit_price == 1000.0
        assert line.quantity == 2
        assert line.category == "Electronics"
        assert line.image_ref == "products/earbuds.jpg"
        assert line.return_policy == "30 days"

    def test_missing_fields_fall_back_to_defaults(self, make_product):
        line = CartLineItem.from_product(make_product())

        assert line.category == DEFAULT_CATEGORY
        assert line.image_ref == DEFAULT_IMAGE
        assert line.return_policy == DEFAULT_RETURN_POLICY

    def test_line_total(self, make_product):
        line = CartLineItem.from_product(make_product(price=250.0), quantity=3)
        assert line.line_total == 750.0


class TestLineInvariants:
    def test_quantity_below_one_is_invalid(self):
        with pytest.raises(ValidationError) as exc:
            CartLineItem(product_id="prod-001", name="Mug", unit_price=5.0, quantity=0)
        assert "quantity" in exc.value.messages

    def test_negative_price_is_invalid(self):
        with pytest.raises(ValidationError) as exc:
            CartLineItem(product_id="prod-001", name="Mug", unit_price=-1.0, quantity=1)
        assert "unit_price" in exc.value.messages

    def test_name_is_required(self):
        with pytest.raises(ValidationError) as exc:
            CartLineItem(product_id="prod-001", unit_price=5.0, quantity=1)
        assert "name" in exc.value.messages

    def test_with_quantity_keeps_snapshot(self, make_product):
        line = CartLineItem.from_product(make_product(category="Kitchen"))
        bigger = line.with_quantity(4)

        assert bigger.quantity == 4
        assert bigger.category == "Kitchen"
        assert line.quantity == 1


class TestStorageForm:
    def test_uses_browser_keys(self, make_product):
        line = CartLineItem.from_product(make_product(), quantity=2)

        assert line.to_storage() == {
            "id": "prod-001",
            "name": "Wireless Earbuds",
            "price": 1000.0,
            "quantity": 2,
            "category": DEFAULT_CATEGORY,
            "image": DEFAULT_IMAGE,
            "returnPolicy": DEFAULT_RETURN_POLICY,
        }

    def test_whole_price_is_written_as_integer(self, make_product):
        assert type(CartLineItem.from_product(make_product(price=1000.0)).to_storage()["price"]) is int
        assert CartLineItem.from_product(make_product(price=12.5)).to_storage()["price"] == 12.5

    def test_from_storage_fills_missing_optional_keys(self):
        line = CartLineItem.from_storage({"id": "prod-9", "name": "Lamp", "price": 40, "quantity": 1})

        assert line.product_id == "prod-9"
        assert line.unit_price == 40.0
        assert line.category == DEFAULT_CATEGORY

    def test_from_storage_rejects_missing_id(self):
        with pytest.raises(ValidationError):
            CartLineItem.from_storage({"name": "Lamp", "price": 40, "quantity": 1})
