"""Delivery details and payment method collected on the checkout form."""

import re
from collections.abc import Mapping
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from ordering.domain import ordering

_PHONE_PATTERN = re.compile(r"^\+?\d+$")

REQUIRED_FIELDS = {
    "customer_name": "Full name",
    "customer_phone": "Phone number",
    "delivery_address": "Street address",
    "city": "City",
    "region": "Region",
}


class PaymentMethod(Enum):
    MOBILE_MONEY = "mobileMoney"
    CARD = "card"
    CASH = "cash"


def is_numeric_phone(number: str) -> bool:
    return bool(_PHONE_PATTERN.match(number.replace(" ", "")))


@ordering.value_object
class ShippingDetails:
    """Where the order is delivered and who receives it.

    Presence is the only check besides the phone number being numeric; the
    address itself is free text.
    """

    customer_name = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=20)
    delivery_address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    region = String(required=True, max_length=100)

    @invariant.post
    def phone_must_be_numeric(self):
        if not is_numeric_phone(self.customer_phone):
            raise ValidationError({"customer_phone": ["Phone number must contain digits only"]})

    @classmethod
    def from_form(cls, form: Mapping[str, object]) -> "ShippingDetails":
        """Validate raw form input and build the details.

        Every problem is reported at once, keyed by field, so the form can show
        them inline.
        """
        values = {name: str(form.get(name) or "").strip() for name in REQUIRED_FIELDS}

        errors = {
            name: [f"{label} is required"] for name, label in REQUIRED_FIELDS.items() if not values[name]
        }
        if values["customer_phone"] and not is_numeric_phone(values["customer_phone"]):
            errors["customer_phone"] = ["Phone number must contain digits only"]
        if errors:
            raise ValidationError(errors)

        return cls(**values)


def parse_payment_method(value: "PaymentMethod | str") -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(
            {"payment_method": [f"Unknown payment method {value!r}"]}
        ) from None
