"""Pure cart mutations.

Each function takes the current lines and returns a new tuple; nothing here
touches storage. ``ShoppingCart`` applies them and persists the result.
"""

from collections.abc import Sequence

from protean.exceptions import ValidationError

from catalogue.product.product import Product
from ordering.cart.items import CartLineItem

Lines = tuple[CartLineItem, ...]


def find_line(items: Sequence[CartLineItem], product_id: str) -> CartLineItem | None:
    return next((item for item in items if str(item.product_id) == str(product_id)), None)


def add_item(items: Sequence[CartLineItem], product: Product, quantity: int = 1) -> Lines:
    """Merge ``quantity`` units of ``product`` into the cart.

    An existing line for the same product keeps its original snapshot and only
    grows its quantity; otherwise a new snapshot line is appended.
    """
    if quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})

    existing = find_line(items, product.id)
    if existing is None:
        return (*items, CartLineItem.from_product(product, quantity))

    return tuple(
        item.with_quantity(item.quantity + quantity) if item is existing else item
        for item in items
    )


def update_quantity(items: Sequence[CartLineItem], product_id: str, new_quantity: int) -> Lines:
    """Replace a line's quantity. A quantity of zero or less removes the line."""
    if new_quantity <= 0:
        return remove_item(items, product_id)

    return tuple(
        item.with_quantity(new_quantity) if str(item.product_id) == str(product_id) else item
        for item in items
    )


def remove_item(items: Sequence[CartLineItem], product_id: str) -> Lines:
    return tuple(item for item in items if str(item.product_id) != str(product_id))


def clear() -> Lines:
    return ()


def item_count(items: Sequence[CartLineItem]) -> int:
    return sum(item.quantity for item in items)


def subtotal(items: Sequence[CartLineItem]) -> float:
    return sum(item.line_total for item in items)
