"""Cart line items: the snapshot of a product held in the shopping cart.

A line captures the product's display fields at the moment it was added
(name, price, category, image, return policy). The snapshot may drift from
the live catalogue record; checkout prices the order from the snapshot.
"""

from protean.fields import Float, Identifier, Integer, String, Text

from catalogue.product.product import Product
from ordering.domain import ordering

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_IMAGE = "/placeholder.svg"
DEFAULT_RETURN_POLICY = "No return policy specified"

# Field name -> key used in the persisted browser format
STORAGE_KEYS = {
    "product_id": "id",
    "name": "name",
    "unit_price": "price",
    "quantity": "quantity",
    "category": "category",
    "image_ref": "image",
    "return_policy": "returnPolicy",
}


@ordering.value_object
class CartLineItem:
    """One product-quantity pairing in the cart."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    category = String(max_length=100, default=DEFAULT_CATEGORY)
    image_ref = String(max_length=1024, default=DEFAULT_IMAGE)
    return_policy = Text(default=DEFAULT_RETURN_POLICY)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartLineItem":
        """Capture a display snapshot of ``product``."""
        return cls(
            product_id=str(product.id),
            name=product.title,
            unit_price=float(product.price),
            quantity=quantity,
            category=product.category or DEFAULT_CATEGORY,
            image_ref=product.image_urls[0] if product.image_urls else DEFAULT_IMAGE,
            return_policy=product.return_policy or DEFAULT_RETURN_POLICY,
        )

    def with_quantity(self, quantity: int) -> "CartLineItem":
        values = self.to_storage()
        values["quantity"] = quantity
        return CartLineItem.from_storage(values)

    # -------------------------------------------------------------------
    # Persisted form
    # -------------------------------------------------------------------
    def to_storage(self) -> dict:
        values = {key: getattr(self, field) for field, key in STORAGE_KEYS.items()}
        # Whole prices are written as integers, the way the browser writes them
        if float(values["price"]).is_integer():
            values["price"] = int(values["price"])
        return values

    @classmethod
    def from_storage(cls, data: dict) -> "CartLineItem":
        """Rebuild a line from its persisted form.

        Raises ValidationError when required keys are missing or values break
        the field constraints (for example a quantity below 1).
        """
        return cls(**{field: data.get(key) for field, key in STORAGE_KEYS.items() if data.get(key) is not None})
