"""Shopping cart service: the explicit store object every view shares.

``ShoppingCart`` keeps the in-memory snapshot, persists the full snapshot on
every mutation (one write per call, no batching), and publishes a cart event
on the event bus so that every subscribed view sees the change immediately.
"""

from collections.abc import Callable

import structlog

from catalogue.product.product import Product
from ordering.cart import mutations
from ordering.cart.events import (
    CartCleared,
    CartEvent,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartReloaded,
)
from ordering.cart.items import CartLineItem
from ordering.cart.store import CartLoadResult, CartStore, serialize
from shared.bus import EventBus
from shared.storage import StorageError

logger = structlog.get_logger(__name__)


class ShoppingCart:
    def __init__(self, store: CartStore, bus: EventBus | None = None) -> None:
        self.store = store
        self.bus = bus or EventBus()
        self.items: tuple[CartLineItem, ...] = ()
        self.last_load: CartLoadResult | None = None
        # Raw value this instance last wrote or read; lets the synchronizer
        # tell foreign writes apart from our own.
        self.last_seen_raw: str | None = None
        self._restore()

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------
    def _restore(self) -> bool:
        """Adopt the persisted cart from a single read of storage.

        Returns False, keeping the current lines, when the storage cannot be
        read.
        """
        try:
            raw = self.store.raw()
        except StorageError as exc:
            logger.error("Cannot read cart storage, keeping current lines", error=str(exc))
            self.last_load = CartLoadResult.failure(str(exc))
            return False

        result = self.store.parse(raw)
        if not result.ok:
            logger.warning("Stored cart is unreadable, starting empty", reason=result.error)
        self.last_load = result
        self.last_seen_raw = raw
        self.items = result.items
        return True

    def reload(self) -> CartLoadResult:
        """Re-read the persisted cart and publish ``CartReloaded``.

        Nothing is published when the storage cannot be read.
        """
        if self._restore():
            self.bus.publish(CartReloaded(items=self.items))
        return self.last_load

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def item_count(self) -> int:
        return mutations.item_count(self.items)

    @property
    def subtotal(self) -> float:
        return mutations.subtotal(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def line_for(self, product_id: str) -> CartLineItem | None:
        return mutations.find_line(self.items, product_id)

    def subscribe(self, listener: Callable[[CartEvent], None]) -> Callable[[], None]:
        """Receive every cart event; returns a callable that unsubscribes."""
        return self.bus.subscribe(listener, CartEvent)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def _commit(self, items: tuple[CartLineItem, ...], event: CartEvent) -> None:
        self.items = items
        if self.store.save(items):
            self.last_seen_raw = serialize(items)
        self.bus.publish(event)

    def add_item(self, product: Product, quantity: int = 1) -> None:
        """Add a product, merging into the existing line for the same product."""
        items = mutations.add_item(self.items, product, quantity)
        self._commit(items, CartItemAdded(items=items, product_id=str(product.id), quantity=quantity))
        logger.debug("Added to cart", product_id=str(product.id), quantity=quantity)

    def update_quantity(self, product_id: str, new_quantity: int) -> None:
        """Replace a line's quantity; zero or less removes the line.

        An unknown ``product_id`` leaves the lines unchanged but is still
        persisted and published.
        """
        if new_quantity <= 0:
            self.remove_item(product_id)
            return

        existing = self.line_for(product_id)
        items = mutations.update_quantity(self.items, product_id, new_quantity)
        self._commit(
            items,
            CartQuantityUpdated(
                items=items,
                product_id=str(product_id),
                previous_quantity=existing.quantity if existing else None,
                new_quantity=new_quantity,
            ),
        )

    def remove_item(self, product_id: str) -> None:
        items = mutations.remove_item(self.items, product_id)
        self._commit(items, CartItemRemoved(items=items, product_id=str(product_id)))

    def clear(self) -> None:
        items = mutations.clear()
        self._commit(items, CartCleared(items=items))
        logger.info("Cart cleared")
