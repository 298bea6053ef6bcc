"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from catalogue.product.product import Product
from ordering.cart.sync import CartBadge
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the catalogue has the following products", target_fixture="catalogue")
def catalogue_products(datatable):
    header, *rows = datatable
    products = [Product.model_validate(dict(zip(header, row))) for row in rows]
    return {product.id: product for product in products}


@given("an empty cart", target_fixture="badge")
def empty_cart(cart):
    assert cart.is_empty
    return CartBadge(cart)


# ---------------------------------------------------------------------------
# Steps shared by the cart and checkout features
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the buyer adds "{product_id}" to the cart'))
@when(parsers.cfparse('the buyer adds "{product_id}" to the cart'))
def add_one(cart, catalogue, product_id):
    cart.add_item(catalogue[product_id])


@given(parsers.cfparse('the buyer adds {qty:d} of "{product_id}" to the cart'))
@when(parsers.cfparse('the buyer adds {qty:d} of "{product_id}" to the cart'))
def add_many(cart, catalogue, error, qty, product_id):
    try:
        cart.add_item(catalogue[product_id], qty)
    except ValidationError as exc:
        error["exc"] = exc


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.is_empty


@then(parsers.cfparse("the cart still has {units:d} units"))
def cart_has_units(cart, units):
    assert cart.item_count == units
