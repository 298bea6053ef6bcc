"""Events published on the event bus whenever the cart changes.

Every event carries the full cart snapshot after the change, so a subscriber
never has to read the persisted store to render itself.
"""

from dataclasses import dataclass

from ordering.cart.items import CartLineItem


@dataclass(frozen=True)
class CartEvent:
    items: tuple[CartLineItem, ...]

    @property
    def item_count(self) -> int:
        """Total units in the cart (sum of quantities, not distinct lines)."""
        return sum(item.quantity for item in self.items)


@dataclass(frozen=True)
class CartItemAdded(CartEvent):
    """A product was added to the cart, or its line quantity was increased."""

    product_id: str = ""
    quantity: int = 0


@dataclass(frozen=True)
class CartQuantityUpdated(CartEvent):
    """The quantity of a cart line was replaced."""

    product_id: str = ""
    previous_quantity: int | None = None
    new_quantity: int = 0


@dataclass(frozen=True)
class CartItemRemoved(CartEvent):
    """A line was removed from the cart."""

    product_id: str = ""


@dataclass(frozen=True)
class CartCleared(CartEvent):
    """Every line was removed from the cart."""


@dataclass(frozen=True)
class CartReloaded(CartEvent):
    """Another writer changed the persisted cart and this view re-read it."""
