"""Tests for the order draft, summary and placed order models."""

from ordering.checkout.order import OrderDraft, OrderLine, OrderSummary, PlacedOrder
from ordering.checkout.shipping import PaymentMethod, ShippingDetails


def _shipping():
    return ShippingDetails(
        customer_name="Amina Njoya",
        customer_phone="677123456",
        delivery_address="12 Rue de la Joie",
        city="Douala",
        region="Littoral",
    )


class TestOrderDraft:
    def test_total_is_sum_of_price_times_quantity(self):
        draft = OrderDraft(
            lines=(
                OrderLine(product_id="A", quantity=2, price=1000.0),
                OrderLine(product_id="B", quantity=1, price=500.0),
            ),
            shipping=_shipping(),
            payment_method=PaymentMethod.MOBILE_MONEY,
        )
        assert draft.total == 2500.0

    def test_payload_matches_order_endpoint(self):
        draft = OrderDraft(
            lines=(OrderLine(product_id="A", quantity=2, price=1000.0),),
            shipping=_shipping(),
            payment_method=PaymentMethod.CARD,
        )

        assert draft.to_payload() == {
            "customer_name": "Amina Njoya",
            "customer_phone": "677123456",
            "delivery_address": "12 Rue de la Joie",
            "city": "Douala",
            "region": "Littoral",
            "paymentMethod": "card",
            "items": [{"product_id": "A", "quantity": 2, "price": 1000.0}],
            "total": 2000.0,
        }


class TestOrderSummary:
    def test_total_equals_subtotal_with_free_shipping(self):
        summary = OrderSummary(item_count=3, subtotal=2500.0)

        assert summary.shipping == "Free"
        assert summary.total == 2500.0


class TestPlacedOrder:
    def test_accepts_numeric_id_and_extra_fields(self):
        order = PlacedOrder.model_validate(
            {"id": 17, "total": 2500, "status": "pending", "created_at": "2024-05-01T10:00:00Z", "buyer_id": 3}
        )

        assert order.id == "17"
        assert order.total == 2500.0
        assert order.model_extra["buyer_id"] == 3

    def test_reads_payment_method_alias(self):
        order = PlacedOrder.model_validate({"id": "o-1", "total": 10, "paymentMethod": "cash"})
        assert order.payment_method == "cash"
