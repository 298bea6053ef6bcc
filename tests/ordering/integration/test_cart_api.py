"""Integration tests for the cart and checkout endpoints via TestClient."""

import asyncio

import httpx
import pytest
from app import create_app
from fastapi.testclient import TestClient
from shared.config import Settings
from storefront import Storefront

PRODUCTS = {
    "prod-A": {"id": "prod-A", "title": "Headphones", "price": 1000, "category": "Electronics"},
    "prod-B": {"id": "prod-B", "title": "Charger", "price": 500},
}


@pytest.fixture()
def storefront(storage, api_client, backend):
    for product_id, product in PRODUCTS.items():
        backend.on("GET", f"/api/products/{product_id}", json={"success": True, "message": "", "data": product})
    shop = Storefront(settings=Settings(), storage=storage, client=api_client)
    yield shop
    shop.badge.close()


@pytest.fixture()
def client(storefront):
    with TestClient(create_app(storefront, sync=False)) as test_client:
        yield test_client


def _add(client, product_id="prod-A", quantity=1):
    response = client.post("/cart/items", json={"product_id": product_id, "quantity": quantity})
    assert response.status_code == 200
    return response.json()


def _on_event_loop():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestCartEndpoints:
    def test_empty_cart(self, client):
        response = client.get("/cart")

        assert response.status_code == 200
        assert response.json() == {"items": [], "item_count": 0, "subtotal": 0.0}

    def test_add_item_snapshots_product(self, client):
        body = _add(client, quantity=2)

        [line] = body["items"]
        assert line["product_id"] == "prod-A"
        assert line["name"] == "Headphones"
        assert line["category"] == "Electronics"
        assert line["line_total"] == 2000.0
        assert body["item_count"] == 2

    def test_add_unknown_product_is_404(self, client):
        response = client.post("/cart/items", json={"product_id": "prod-missing"})
        assert response.status_code == 404

    def test_add_zero_quantity_is_422(self, client):
        response = client.post("/cart/items", json={"product_id": "prod-A", "quantity": 0})
        assert response.status_code == 422

    def test_update_and_remove(self, client):
        _add(client, "prod-A")
        _add(client, "prod-B")

        updated = client.put("/cart/items/prod-A", json={"quantity": 4}).json()
        assert updated["item_count"] == 5

        removed = client.delete("/cart/items/prod-B").json()
        assert [line["product_id"] for line in removed["items"]] == ["prod-A"]

    def test_update_to_zero_removes_line(self, client):
        _add(client)
        body = client.put("/cart/items/prod-A", json={"quantity": 0}).json()
        assert body["items"] == []

    def test_clear(self, client, storefront):
        _add(client)
        body = client.delete("/cart").json()

        assert body["item_count"] == 0
        assert storefront.cart.is_empty

    def test_badge_counts_units(self, client):
        _add(client, "prod-A", 3)
        assert client.get("/cart/badge").json() == {"count": 3}

    def test_summary(self, client):
        _add(client, "prod-A", 2)
        _add(client, "prod-B")

        assert client.get("/cart/summary").json() == {
            "item_count": 3,
            "subtotal": 2500.0,
            "shipping": "Free",
            "total": 2500.0,
        }

    def test_health_reports_cart_units(self, client):
        _add(client, "prod-A", 2)
        assert client.get("/health").json() == {"status": "ok", "cart_items": 2}


class TestCheckoutEndpoint:
    FORM = {
        "customer_name": "Amina Njoya",
        "customer_phone": "677123456",
        "delivery_address": "12 Rue de la Joie",
        "city": "Douala",
        "region": "Littoral",
        "payment_method": "mobileMoney",
    }

    def test_place_order(self, client, backend):
        backend.on("POST", "/api/orders", status=201, json={"id": "ord-1", "total": 1000, "status": "pending"})
        _add(client)

        response = client.post("/checkout", json=self.FORM)

        assert response.status_code == 201
        assert response.json() == {"order_id": "ord-1", "total": 1000.0, "status": "pending"}

    def test_missing_address_is_400_and_sends_nothing(self, client, backend):
        _add(client)
        requests_before = len(backend.requests)

        response = client.post("/checkout", json={**self.FORM, "delivery_address": ""})

        assert response.status_code == 400
        assert "delivery_address" in response.json()["error"]
        assert len(backend.requests) == requests_before

    def test_backend_failure_is_502(self, client, backend):
        backend.on("POST", "/api/orders", status=500, json={"message": "boom"})
        _add(client)

        response = client.post("/checkout", json=self.FORM)

        assert response.status_code == 502
        assert client.get("/cart/badge").json() == {"count": 1}

    def test_order_response_without_id_is_502(self, client, backend):
        backend.on("POST", "/api/orders", status=201, json={"status": "queued", "total": 1000})
        _add(client)

        response = client.post("/checkout", json=self.FORM)

        assert response.status_code == 502
        assert response.json() == {"detail": "The order service returned an unexpected response."}


class TestBackendCalls:
    def test_backend_is_not_called_from_the_event_loop(self, client, backend):
        seen = []

        def product(request):
            seen.append(_on_event_loop())
            return httpx.Response(200, json={"success": True, "data": PRODUCTS["prod-A"]})

        def order(request):
            seen.append(_on_event_loop())
            return httpx.Response(201, json={"id": "ord-2", "total": 1000, "status": "pending"})

        backend.on("GET", "/api/products/prod-A", handler=product)
        backend.on("POST", "/api/orders", handler=order)

        _add(client)
        response = client.post("/checkout", json=TestCheckoutEndpoint.FORM)

        assert response.status_code == 201
        assert seen == [False, False]
