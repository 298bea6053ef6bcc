"""Pydantic request/response schemas for the local cart API.

These are external contracts, separate from the Protean value objects held
in the cart.
"""

from pydantic import BaseModel, Field

from ordering.checkout.shipping import PaymentMethod


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str
    name: str
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    category: str | None = None
    image_ref: str | None = None
    return_policy: str | None = None
    line_total: float


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int  # zero or less removes the line


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_name": "Amina Njoya",
                    "customer_phone": "677123456",
                    "delivery_address": "12 Rue de la Joie",
                    "city": "Douala",
                    "region": "Littoral",
                    "payment_method": "mobileMoney",
                }
            ]
        }
    }

    customer_name: str = ""
    customer_phone: str = ""
    delivery_address: str = ""
    city: str = ""
    region: str = ""
    payment_method: PaymentMethod = PaymentMethod.MOBILE_MONEY


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class CartResponse(BaseModel):
    items: list[CartLineSchema]
    item_count: int
    subtotal: float


class BadgeResponse(BaseModel):
    count: int


class OrderSummaryResponse(BaseModel):
    item_count: int
    subtotal: float
    shipping: str
    total: float


class PlacedOrderResponse(BaseModel):
    order_id: str
    total: float
    status: str
