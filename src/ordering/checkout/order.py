"""Order draft, order summary and the order returned by the backend."""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from ordering.checkout.shipping import PaymentMethod, ShippingDetails

SHIPPING_LABEL = "Free"


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity: int
    price: float

    def to_payload(self) -> dict:
        return {"product_id": self.product_id, "quantity": self.quantity, "price": self.price}


@dataclass(frozen=True)
class OrderSummary:
    """Figures shown next to the checkout form.

    Shipping is not priced at this stage; it is displayed as a fixed label and
    the total equals the subtotal.
    """

    item_count: int
    subtotal: float
    shipping: str = SHIPPING_LABEL

    @property
    def total(self) -> float:
        return self.subtotal


@dataclass(frozen=True)
class OrderDraft:
    """The order-creation request, built at submission time and never stored."""

    lines: tuple[OrderLine, ...]
    shipping: ShippingDetails
    payment_method: PaymentMethod
    total: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "total", sum(line.price * line.quantity for line in self.lines))

    def to_payload(self) -> dict:
        return {
            "customer_name": self.shipping.customer_name,
            "customer_phone": self.shipping.customer_phone,
            "delivery_address": self.shipping.delivery_address,
            "city": self.shipping.city,
            "region": self.shipping.region,
            "paymentMethod": self.payment_method.value,
            "items": [line.to_payload() for line in self.lines],
            "total": self.total,
        }


class PlacedOrder(BaseModel):
    """Order snapshot returned by ``POST /api/orders``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    total: float
    status: str = "pending"
    created_at: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    payment_method: str | None = Field(default=None, alias="paymentMethod")
